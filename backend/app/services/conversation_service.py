from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from .. import models
from ..enums import MessageRole
from ..models.conversation import DEFAULT_CONVERSATION_TITLE
from .ledger_service import get_owned_or_404

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 50


def title_from_message(message: Optional[str]) -> str:
    """Conversation title derived from its first message."""
    if not message:
        return DEFAULT_CONVERSATION_TITLE
    title = message[:TITLE_MAX_LENGTH]
    if len(message) > TITLE_MAX_LENGTH:
        title += "..."
    return title


class ConversationService:
    """Conversations and their append-only message log."""

    @staticmethod
    def list_conversations(db: Session, user_id: UUID) -> List[models.Conversation]:
        return db.query(models.Conversation).filter(
            models.Conversation.user_id == user_id
        ).order_by(models.Conversation.updated_at.desc()).all()

    @staticmethod
    def get_conversation(db: Session, user_id: UUID, conversation_id: UUID) -> models.Conversation:
        return get_owned_or_404(db, models.Conversation, conversation_id, user_id, "Conversation")

    @staticmethod
    def create_conversation(db: Session, user_id: UUID, title: Optional[str] = None) -> models.Conversation:
        now = datetime.now(timezone.utc)
        conversation = models.Conversation(
            user_id=user_id,
            title=title or DEFAULT_CONVERSATION_TITLE,
            created_at=now,
            updated_at=now,
        )
        db.add(conversation)
        db.commit()
        db.refresh(conversation)
        return conversation

    @staticmethod
    def get_or_create(db: Session, user_id: UUID, conversation_id: Optional[UUID], first_message: str) -> models.Conversation:
        """Return the caller's conversation, creating one titled after first_message if no id is given."""
        if conversation_id is None:
            conversation = ConversationService.create_conversation(db, user_id, title_from_message(first_message))
            logger.info(f"Created conversation {conversation.id} for user {user_id}")
            return conversation
        return ConversationService.get_conversation(db, user_id, conversation_id)

    @staticmethod
    def list_messages(db: Session, user_id: UUID, conversation_id: UUID) -> List[models.Message]:
        ConversationService.get_conversation(db, user_id, conversation_id)
        return db.query(models.Message).filter(
            models.Message.conversation_id == conversation_id
        ).order_by(models.Message.created_at, models.Message.id).all()

    @staticmethod
    def append_message(db: Session, conversation: models.Conversation, role: MessageRole, content: str) -> models.Message:
        """Persist one message and advance the conversation's last-updated timestamp."""
        message = models.Message(
            conversation_id=conversation.id,
            role=role,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
        db.add(message)
        conversation.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def delete_conversation(db: Session, user_id: UUID, conversation_id: UUID) -> None:
        conversation = ConversationService.get_conversation(db, user_id, conversation_id)
        db.delete(conversation)
        db.commit()
