from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime
from ..enums import AccountType


class AccountBase(BaseModel):
    name: str = Field(..., min_length=1)
    code: Optional[str] = None
    account_type: AccountType
    parent_account_id: Optional[UUID] = None


class AccountCreate(AccountBase):
    pass


class AccountResponse(AccountBase):
    id: UUID
    user_id: UUID
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
