from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime
from ..enums import MessageRole


class ConversationCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)


class ConversationResponse(BaseModel):
    id: UUID
    title: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    role: MessageRole
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
