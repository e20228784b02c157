"""
Executes one structured command from the AI accountant.

Each catalog action maps to exactly one service call, always scoped to the
authenticated caller's user id. Failures never escape: they come back as an
``ActionResult`` carrying the fixed error-format message.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID
import logging

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..schemas import (
    AccountCreate,
    BudgetCreate,
    CategoryCreate,
    CustomerCreate,
    TransactionCreate,
    TransactionUpdate,
    VendorCreate,
)
from ..schemas.actions import (
    ActionCommand,
    CreateAccountCommand,
    CreateBudgetCommand,
    CreateCategoryCommand,
    CreateCustomerCommand,
    CreateTransactionCommand,
    CreateVendorCommand,
    UnknownAction,
    UpdateTransactionCommand,
)
from .budget_service import BudgetService
from .ledger_service import AccountService, CategoryService, CounterpartyService
from .transaction_service import TransactionService

logger = logging.getLogger(__name__)

DEFAULT_UNKNOWN_ACTION_RESPONSE = "Action completed successfully."


class ActionExecutionError(Exception):
    """Raised when an action cannot be carried out for the caller"""
    pass


@dataclass
class ActionResult:
    action: str
    response: str
    success: bool


def format_money(amount: Decimal) -> str:
    return f"${amount:.2f}"


def error_message(detail: str) -> str:
    return f"❌ Error performing action: {detail}"


def _failure_detail(error: Exception) -> str:
    if isinstance(error, HTTPException):
        return str(error.detail)
    if isinstance(error, SQLAlchemyError):
        # Driver messages carry the SQL; keep only the first line
        return str(getattr(error, "orig", None) or error).splitlines()[0]
    return str(error)


class ActionExecutor:
    """Runs catalog commands against the persistence services."""

    def execute(
        self,
        db: Session,
        user_id: UUID,
        command: Union[ActionCommand, UnknownAction],
        conversation_id: Optional[UUID] = None,
    ) -> ActionResult:
        if isinstance(command, UnknownAction):
            logger.info(f"Unknown action {command.action!r}; echoing model response")
            return ActionResult(
                action=command.action,
                response=command.response or DEFAULT_UNKNOWN_ACTION_RESPONSE,
                success=False,
            )

        logger.info(f"Performing action {command.action} for user {user_id}")
        try:
            response = self._dispatch(db, user_id, command, conversation_id)
        except (HTTPException, SQLAlchemyError, ValidationError, ActionExecutionError, ValueError) as e:
            db.rollback()
            logger.error(f"Error performing action {command.action}: {e}")
            return ActionResult(action=command.action, response=error_message(_failure_detail(e)), success=False)

        return ActionResult(action=command.action, response=response, success=True)

    def _dispatch(self, db: Session, user_id: UUID, command: ActionCommand, conversation_id: Optional[UUID]) -> str:
        if isinstance(command, CreateTransactionCommand):
            return self._create_transaction(db, user_id, command, conversation_id)
        if isinstance(command, UpdateTransactionCommand):
            return self._update_transaction(db, user_id, command)
        if isinstance(command, CreateBudgetCommand):
            return self._create_budget(db, user_id, command)
        if isinstance(command, CreateCategoryCommand):
            category = CategoryService.create_category(
                db, user_id, CategoryCreate(**command.data.model_dump(exclude={"color"}), color=command.data.color_or_default)
            )
            return f'✅ Category "{category.name}" created successfully!'
        if isinstance(command, CreateAccountCommand):
            account = AccountService.create_account(db, user_id, AccountCreate(**command.data.model_dump()))
            return f'✅ Account "{account.name}" created successfully!'
        if isinstance(command, CreateCustomerCommand):
            customer = CounterpartyService.create_customer(db, user_id, CustomerCreate(**command.data.model_dump()))
            return f'✅ Customer "{customer.name}" created successfully!'
        if isinstance(command, CreateVendorCommand):
            vendor = CounterpartyService.create_vendor(db, user_id, VendorCreate(**command.data.model_dump()))
            return f'✅ Vendor "{vendor.name}" created successfully!'
        raise ActionExecutionError(f"Unsupported action {command.action}")

    def _create_transaction(self, db: Session, user_id: UUID, command: CreateTransactionCommand, conversation_id: Optional[UUID]) -> str:
        data = command.data
        transaction = TransactionService.create_transaction(
            db, user_id, TransactionCreate(**data.model_dump(), conversation_id=conversation_id)
        )
        kind = "income" if transaction.amount > 0 else "expense"
        return (
            f"✅ Transaction recorded successfully! Added {kind} of "
            f'{format_money(abs(transaction.amount))} for "{transaction.description}".'
        )

    def _update_transaction(self, db: Session, user_id: UUID, command: UpdateTransactionCommand) -> str:
        changes = command.data.model_dump(exclude_unset=True, exclude={"transaction_id"})
        if not changes:
            raise ActionExecutionError("No fields to update")
        transaction = TransactionService.update_transaction(
            db, user_id, command.data.transaction_id, TransactionUpdate(**changes)
        )
        return f'✅ Transaction "{transaction.description}" updated successfully!'

    def _create_budget(self, db: Session, user_id: UUID, command: CreateBudgetCommand) -> str:
        budget = BudgetService.create_budget(db, user_id, BudgetCreate(**command.data.model_dump()))
        return (
            f'✅ Budget "{budget.name}" created successfully! '
            f"Set limit of {format_money(budget.amount)} for {budget.budget_type.value} period."
        )
