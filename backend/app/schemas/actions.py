"""
Structured commands the AI accountant may ask the backend to perform.

A model reply that parses as a JSON object with an ``action`` key is validated
into exactly one of the command models below, discriminated on ``action``.
Field sets mirror what the system prompt asks the model to send; unknown keys
(including any ``user_id``) are ignored.
"""
from datetime import date
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter

from ..enums import AccountType, BudgetType, CustomerType, TransactionStatus, VendorType
from ..models.category import DEFAULT_CATEGORY_COLOR


class ActionData(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TransactionData(ActionData):
    amount: Decimal
    description: str = Field(..., min_length=1)
    account_id: UUID
    category_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    transaction_date: Optional[date] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


class TransactionUpdateData(ActionData):
    transaction_id: UUID = Field(validation_alias=AliasChoices("transaction_id", "id"))
    amount: Optional[Decimal] = None
    description: Optional[str] = Field(None, min_length=1)
    account_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    transaction_date: Optional[date] = None
    status: Optional[TransactionStatus] = None
    notes: Optional[str] = None


class BudgetData(ActionData):
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    budget_type: BudgetType = BudgetType.MONTHLY
    category_id: Optional[UUID] = None
    account_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CategoryData(ActionData):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None

    @property
    def color_or_default(self) -> str:
        return self.color or DEFAULT_CATEGORY_COLOR


class AccountData(ActionData):
    name: str = Field(..., min_length=1)
    account_type: AccountType
    code: Optional[str] = None


class CounterpartyData(ActionData):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    company_name: Optional[str] = None
    tax_number: Optional[str] = None
    payment_terms: int = Field(30, ge=0)
    credit_limit: Decimal = Decimal("0")
    notes: Optional[str] = None


class CustomerData(CounterpartyData):
    customer_type: CustomerType = CustomerType.CUSTOMER


class VendorData(CounterpartyData):
    vendor_type: VendorType = VendorType.VENDOR


class _Command(BaseModel):
    model_config = ConfigDict(extra="ignore")

    response: Optional[str] = None


class CreateTransactionCommand(_Command):
    action: Literal["CREATE_TRANSACTION"]
    data: TransactionData


class UpdateTransactionCommand(_Command):
    action: Literal["UPDATE_TRANSACTION"]
    data: TransactionUpdateData


class CreateBudgetCommand(_Command):
    action: Literal["CREATE_BUDGET"]
    data: BudgetData


class CreateCategoryCommand(_Command):
    action: Literal["CREATE_CATEGORY"]
    data: CategoryData


class CreateAccountCommand(_Command):
    action: Literal["CREATE_ACCOUNT"]
    data: AccountData


class CreateCustomerCommand(_Command):
    action: Literal["CREATE_CUSTOMER"]
    data: CustomerData


class CreateVendorCommand(_Command):
    action: Literal["CREATE_VENDOR"]
    data: VendorData


ActionCommand = Annotated[
    Union[
        CreateTransactionCommand,
        UpdateTransactionCommand,
        CreateBudgetCommand,
        CreateCategoryCommand,
        CreateAccountCommand,
        CreateCustomerCommand,
        CreateVendorCommand,
    ],
    Field(discriminator="action"),
]

action_command_adapter = TypeAdapter(ActionCommand)


class UnknownAction(BaseModel):
    """An action name outside the catalog; only its response text is used"""
    action: str
    response: Optional[str] = None
