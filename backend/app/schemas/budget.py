from pydantic import BaseModel, Field, model_validator
from typing import Optional
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal
from ..enums import BudgetType, BudgetStatus


class BudgetCreate(BaseModel):
    """
    Schema for creating a budget. When the window is omitted it defaults to
    the current calendar period of budget_type.
    """
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    budget_type: BudgetType = BudgetType.MONTHLY
    category_id: Optional[UUID] = None
    account_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BudgetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, gt=0)
    category_id: Optional[UUID] = None
    account_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        """Only category_id and account_id may be cleared."""
        for field in ("name", "amount", "start_date", "end_date", "is_active"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class BudgetResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    amount: Decimal
    spent_amount: Decimal
    budget_type: BudgetType
    category_id: Optional[UUID] = None
    account_id: Optional[UUID] = None
    category_name: Optional[str] = None
    account_name: Optional[str] = None
    start_date: date
    end_date: date
    is_active: bool
    progress: float = Field(description="spent_amount as a percentage of amount, capped at 100")
    status: BudgetStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BudgetRecomputeResponse(BaseModel):
    budgets_updated: int
