"""
Conversational action dispatcher for the AI accountant.

One chat message goes through a fixed, stateless pipeline:

1. find or create the conversation and store the user's message
2. gather a bounded snapshot of the user's books
3. run attachment extraction (advisory only)
4. ask the intent classifier (the language model) for a reply
5. if the reply is a catalog action, execute at most one persistence call
6. store the final reply as an assistant message

Model failures degrade to a fixed apology and unparseable replies are returned
as plain text. Action failures come back as error-format text. Anything else
stores the apology as the reply before the error propagates, so every path
ends with a persisted assistant message.
"""
from typing import Any, Dict, Optional
import functools
import logging

import anyio

from sqlalchemy.orm import Session

from .. import models
from ..enums import MessageRole
from ..schemas import ChatRequest, ChatResponse
from .action_executor import ActionExecutor, error_message
from .action_parser import InvalidActionPayload
from .attachment_service import AttachmentExtractionError, AttachmentExtractor
from .context_service import FinancialContextService
from .conversation_service import ConversationService
from .intent_classifier import IntentClassifier
from .openai_llm_service import LLMServiceError

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "I apologize, but I encountered an error processing your request. Please try again."


class AccountantDispatcher:
    """
    Stateless across calls; all state lives in the database.
    Collaborators are injected once per process.
    """

    def __init__(
        self,
        classifier: IntentClassifier,
        extractor: AttachmentExtractor,
        executor: Optional[ActionExecutor] = None,
    ):
        self.classifier = classifier
        self.extractor = extractor
        self.executor = executor or ActionExecutor()

    async def handle_message(self, db: Session, user: models.User, request: ChatRequest) -> ChatResponse:
        user_id = user.id
        # Session work runs in a worker thread so the event loop stays free
        conversation = await anyio.to_thread.run_sync(
            ConversationService.get_or_create, db, user_id, request.conversation_id, request.message
        )
        conversation_id = conversation.id
        logger.info(
            f"AI Accountant request: conversation={conversation_id} "
            f"attachments={len(request.attachments)} user={user_id}"
        )
        await anyio.to_thread.run_sync(
            ConversationService.append_message, db, conversation, MessageRole.USER, request.message
        )

        try:
            context = await anyio.to_thread.run_sync(FinancialContextService.gather, db, user_id)
            attachment_analysis = await self._analyze_attachments(request, user_id)
            response_text, action_type, performed = await self._respond(
                db, user_id, conversation_id, request.message, context, attachment_analysis
            )
        except Exception:
            logger.error(f"Unexpected failure answering conversation {conversation_id}; storing apology")
            db.rollback()
            await anyio.to_thread.run_sync(self._store_reply, db, user_id, conversation_id, APOLOGY_MESSAGE)
            raise

        await anyio.to_thread.run_sync(self._store_reply, db, user_id, conversation_id, response_text)

        return ChatResponse(
            response=response_text,
            action_performed=performed,
            action_type=action_type,
            conversation_id=conversation_id,
        )

    @staticmethod
    def _store_reply(db: Session, user_id, conversation_id, text: str) -> None:
        conversation = ConversationService.get_conversation(db, user_id, conversation_id)
        ConversationService.append_message(db, conversation, MessageRole.ASSISTANT, text)

    async def _analyze_attachments(self, request: ChatRequest, user_id) -> Optional[Dict[str, Any]]:
        if not request.attachments:
            return None
        try:
            return await self.extractor.extract(request.attachments, user_id)
        except AttachmentExtractionError as e:
            # Extraction only adds context; the message is still answered without it
            logger.warning(f"Attachment extraction failed for user {user_id}: {e}")
            return None

    async def _respond(self, db: Session, user_id, conversation_id, message, context, attachment_analysis):
        """Returns (response text, action type or None, whether an action was performed)."""
        try:
            classification = await self.classifier.classify(message, context, attachment_analysis)
        except LLMServiceError as e:
            logger.error(f"Model call failed for conversation {conversation_id}: {e}")
            return APOLOGY_MESSAGE, None, False
        except InvalidActionPayload as e:
            logger.warning(f"Rejected {e.action} payload: {e}")
            return error_message(str(e)), e.action, False

        if isinstance(classification, str):
            return classification, None, False

        result = await anyio.to_thread.run_sync(
            functools.partial(self.executor.execute, db, user_id, classification, conversation_id=conversation_id)
        )
        return result.response, result.action, result.success
