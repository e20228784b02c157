from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from ..db import Base
from ..enums import AccountType
from ..types import ValueEnum


class Account(Base):
    """
    Chart-of-accounts entry owned by a single user.
    The parent link allows a hierarchy but no balancing logic walks it.
    """
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("user_id", "code", name="uq_accounts_user_code"),
    )
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True)
    account_type = Column(ValueEnum(AccountType, name="account_type"), nullable=False)
    parent_account_id = Column(UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    user = relationship("User", back_populates="accounts")
    parent = relationship("Account", remote_side=[id])
