from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal
from ..enums import TransactionStatus


class TransactionCreate(BaseModel):
    """Schema for recording a transaction (negative amount = expense)"""
    description: str = Field(..., min_length=1)
    amount: Decimal
    account_id: UUID
    transaction_date: Optional[date] = None
    category_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    status: TransactionStatus = TransactionStatus.PENDING
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    conversation_id: Optional[UUID] = None


class TransactionUpdate(BaseModel):
    """Partial update; only fields that are set are written"""
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = None
    account_id: Optional[UUID] = None
    transaction_date: Optional[date] = None
    category_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    status: Optional[TransactionStatus] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode='after')
    def reject_null_required_fields(self):
        """Required columns may be omitted but not set to null."""
        for field in ("description", "amount", "transaction_date", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class TransactionResponse(BaseModel):
    id: UUID
    user_id: UUID
    description: str
    amount: Decimal
    transaction_date: date
    status: TransactionStatus
    account_id: UUID
    category_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    vendor_id: Optional[UUID] = None
    conversation_id: Optional[UUID] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    account_name: Optional[str] = None
    category_name: Optional[str] = None
    customer_name: Optional[str] = None
    vendor_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    total: int
