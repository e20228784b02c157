from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal
from ..enums import CustomerType, VendorType


class CounterpartyBase(BaseModel):
    """Fields shared by customers and vendors"""
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    company_name: Optional[str] = None
    tax_number: Optional[str] = None
    payment_terms: int = Field(30, ge=0, description="Payment terms in days")
    credit_limit: Decimal = Decimal("0")
    notes: Optional[str] = None


class CustomerCreate(CounterpartyBase):
    customer_type: CustomerType = CustomerType.CUSTOMER


class CustomerResponse(CustomerCreate):
    id: UUID
    user_id: UUID
    balance: Optional[Decimal] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VendorCreate(CounterpartyBase):
    vendor_type: VendorType = VendorType.VENDOR


class VendorResponse(VendorCreate):
    id: UUID
    user_id: UUID
    balance: Optional[Decimal] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
