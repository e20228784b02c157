from sqlalchemy import Column, String, Text, Numeric, Date, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import date, datetime, timezone
import uuid
from ..db import Base
from ..enums import TransactionStatus
from ..types import ValueEnum


class Transaction(Base):
    """
    A single money movement. Negative amounts are expenses, positive amounts
    are income or asset inflows (convention only, not enforced).
    """
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_rollup", "user_id", "category_id", "transaction_date"),
    )
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    conversation_id = Column(UUID(as_uuid=True), ForeignKey("conversations.id", ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    transaction_date = Column(Date, nullable=False, default=date.today, index=True)
    account_id = Column(UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False, index=True)
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    vendor_id = Column(UUID(as_uuid=True), ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(ValueEnum(TransactionStatus, name="transaction_status"), nullable=False, default=TransactionStatus.PENDING)
    reference_number = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    account = relationship("Account")
    category = relationship("Category")
    customer = relationship("Customer")
    vendor = relationship("Vendor")
    conversation = relationship("Conversation")
