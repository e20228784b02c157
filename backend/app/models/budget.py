from sqlalchemy import Column, String, Numeric, Date, DateTime, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from ..db import Base
from ..enums import BudgetType
from ..types import ValueEnum


class Budget(Base):
    """
    Spending target over a date window.

    spent_amount is derived: it always equals the sum of |amount| of the
    owner's negative transactions in category_id dated within
    [start_date, end_date]. It is maintained by the budget rollup service.
    """
    __tablename__ = "budgets"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_budgets_window"),
    )
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id"), nullable=True, index=True)
    account_id = Column(UUID(as_uuid=True), ForeignKey("accounts.id"), nullable=True)
    budget_type = Column(ValueEnum(BudgetType, name="budget_type"), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    spent_amount = Column(Numeric(15, 2), nullable=False, default=0)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    category = relationship("Category")
    account = relationship("Account")
