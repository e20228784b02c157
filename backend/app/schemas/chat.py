from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from uuid import UUID


class ChatAttachment(BaseModel):
    """File-like attachment metadata sent alongside a chat message"""
    name: str
    mime_type: Optional[str] = None
    size: Optional[int] = Field(None, ge=0)
    url: Optional[str] = None
    content_base64: Optional[str] = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    conversation_id: Optional[UUID] = Field(None, alias="conversationId")
    user_id: Optional[UUID] = Field(None, alias="userId")
    attachments: List[ChatAttachment] = Field(default_factory=list)


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    action_performed: bool = Field(False, alias="actionPerformed")
    action_type: Optional[str] = Field(None, alias="actionType")
    conversation_id: Optional[UUID] = Field(None, alias="conversationId")


class ChatErrorResponse(BaseModel):
    error: str
    response: str
