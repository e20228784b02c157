from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
import uuid
from ..db import Base
from ..enums import VendorType
from ..types import ValueEnum


class Vendor(Base):
    """
    Someone the business owes money to (vendor or supplier).
    """
    __tablename__ = "vendors"
    __table_args__ = (
        Index("ix_vendors_user_active", "user_id", "is_active"),
    )
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    company_name = Column(String, nullable=True)
    tax_number = Column(String, nullable=True)
    payment_terms = Column(Integer, nullable=True, default=30)  # days
    credit_limit = Column(Numeric(15, 2), nullable=True, default=0)
    balance = Column(Numeric(15, 2), nullable=True, default=0)
    vendor_type = Column(ValueEnum(VendorType, name="vendor_type"), nullable=False, default=VendorType.VENDOR)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
