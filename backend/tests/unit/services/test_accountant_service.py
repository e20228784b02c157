"""
Dispatcher tests with a stubbed model client.

The LLM is replaced by an AsyncMock so each test controls the exact reply
text; everything below the classifier runs against the SQLite session.
"""
import json
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from app import models
from app.enums import MessageRole
from app.schemas import ChatAttachment, ChatRequest
from app.services.accountant_service import APOLOGY_MESSAGE, AccountantDispatcher
from app.services.attachment_service import AttachmentExtractionError, PlaceholderAttachmentExtractor
from app.services.intent_classifier import LLMIntentClassifier
from app.services.openai_llm_service import LLMServiceError


def _dispatcher(reply=None, side_effect=None, extractor=None):
    llm = AsyncMock()
    if side_effect is not None:
        llm.chat.side_effect = side_effect
    else:
        llm.chat.return_value = reply
    dispatcher = AccountantDispatcher(
        classifier=LLMIntentClassifier(llm),
        extractor=extractor or PlaceholderAttachmentExtractor(),
    )
    return dispatcher, llm


def _messages(db, conversation_id):
    return db.query(models.Message).filter_by(conversation_id=conversation_id).order_by(
        models.Message.created_at
    ).all()


class TestAccountantDispatcher:

    @pytest.mark.asyncio
    async def test_plain_text_reply(self, db_session, test_user):
        dispatcher, _ = _dispatcher("Your cash position looks healthy.")

        result = await dispatcher.handle_message(
            db_session, test_user, ChatRequest(message="How am I doing?")
        )

        assert result.response == "Your cash position looks healthy."
        assert result.action_performed is False
        assert result.action_type is None
        assert db_session.query(models.Transaction).count() == 0

    @pytest.mark.asyncio
    async def test_messages_are_persisted_in_order(self, db_session, test_user):
        dispatcher, _ = _dispatcher("Hello!")

        result = await dispatcher.handle_message(db_session, test_user, ChatRequest(message="Hi there"))

        messages = _messages(db_session, result.conversation_id)
        assert [(m.role, m.content) for m in messages] == [
            (MessageRole.USER, "Hi there"),
            (MessageRole.ASSISTANT, "Hello!"),
        ]

    @pytest.mark.asyncio
    async def test_new_conversation_is_titled_from_message(self, db_session, test_user):
        dispatcher, _ = _dispatcher("Noted.")
        long_message = "Please help me understand my travel spending for the first quarter of the year"

        result = await dispatcher.handle_message(db_session, test_user, ChatRequest(message=long_message))

        conversation = db_session.get(models.Conversation, result.conversation_id)
        assert conversation.user_id == test_user.id
        assert conversation.title == long_message[:50] + "..."

    @pytest.mark.asyncio
    async def test_existing_conversation_is_reused(self, db_session, test_user):
        dispatcher, _ = _dispatcher("Sure.")
        first = await dispatcher.handle_message(db_session, test_user, ChatRequest(message="One"))

        second = await dispatcher.handle_message(
            db_session, test_user, ChatRequest(message="Two", conversation_id=first.conversation_id)
        )

        assert second.conversation_id == first.conversation_id
        assert db_session.query(models.Conversation).count() == 1
        assert len(_messages(db_session, first.conversation_id)) == 4

    @pytest.mark.asyncio
    async def test_foreign_conversation_is_not_found(self, db_session, test_user, other_user):
        dispatcher, llm = _dispatcher("Sure.")
        theirs = models.Conversation(user_id=other_user.id, title="Private")
        db_session.add(theirs)
        db_session.commit()

        with pytest.raises(HTTPException) as exc_info:
            await dispatcher.handle_message(
                db_session, test_user, ChatRequest(message="Hi", conversation_id=theirs.id)
            )

        assert exc_info.value.status_code == 404
        llm.chat.assert_not_called()

    @pytest.mark.asyncio
    async def test_taxi_ride_is_recorded_as_expense(self, db_session, test_user, cash_account):
        reply = json.dumps({
            "action": "CREATE_TRANSACTION",
            "data": {"amount": -25, "description": "Taxi ride", "account_id": str(cash_account.id)},
            "response": "Recording your taxi ride",
        })
        dispatcher, _ = _dispatcher(reply)

        result = await dispatcher.handle_message(
            db_session, test_user, ChatRequest(message="I spent $25 on a taxi ride")
        )

        assert result.action_performed is True
        assert result.action_type == "CREATE_TRANSACTION"
        assert "expense" in result.response
        assert "25" in result.response
        transaction = db_session.query(models.Transaction).one()
        assert transaction.amount == Decimal("-25.00")
        assert transaction.conversation_id == result.conversation_id
        assert _messages(db_session, result.conversation_id)[-1].content == result.response

    @pytest.mark.asyncio
    async def test_fenced_action_reply(self, db_session, test_user):
        reply = '```json\n{"action": "CREATE_CATEGORY", "data": {"name": "Meals"}}\n```'
        dispatcher, _ = _dispatcher(reply)

        result = await dispatcher.handle_message(db_session, test_user, ChatRequest(message="Add a Meals category"))

        assert result.action_performed is True
        assert result.response == '✅ Category "Meals" created successfully!'

    @pytest.mark.asyncio
    async def test_invalid_account_creates_nothing(self, db_session, test_user):
        reply = json.dumps({
            "action": "CREATE_TRANSACTION",
            "data": {"amount": -25, "description": "Taxi ride", "account_id": str(uuid4())},
        })
        dispatcher, _ = _dispatcher(reply)

        result = await dispatcher.handle_message(db_session, test_user, ChatRequest(message="Taxi, $25"))

        assert result.action_performed is False
        assert result.action_type == "CREATE_TRANSACTION"
        assert result.response.startswith("❌ Error performing action:")
        assert db_session.query(models.Transaction).count() == 0
        assert _messages(db_session, result.conversation_id)[-1].content == result.response

    @pytest.mark.asyncio
    async def test_invalid_payload_becomes_error_text(self, db_session, test_user):
        reply = json.dumps({"action": "CREATE_BUDGET", "data": {"name": "Travel", "amount": -10}})
        dispatcher, _ = _dispatcher(reply)

        result = await dispatcher.handle_message(db_session, test_user, ChatRequest(message="Budget"))

        assert result.action_performed is False
        assert result.action_type == "CREATE_BUDGET"
        assert result.response.startswith("❌ Error performing action: Invalid data for CREATE_BUDGET")
        assert db_session.query(models.Budget).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_action_is_not_performed(self, db_session, test_user):
        dispatcher, _ = _dispatcher(json.dumps({"action": "SEND_INVOICE", "response": "Invoice sent"}))

        result = await dispatcher.handle_message(db_session, test_user, ChatRequest(message="Send it"))

        assert result.response == "Invoice sent"
        assert result.action_performed is False
        assert result.action_type == "SEND_INVOICE"

    @pytest.mark.asyncio
    async def test_model_failure_returns_apology(self, db_session, test_user):
        dispatcher, _ = _dispatcher(side_effect=LLMServiceError("upstream 503"))

        result = await dispatcher.handle_message(db_session, test_user, ChatRequest(message="Hello"))

        assert result.response == APOLOGY_MESSAGE
        assert result.action_performed is False
        messages = _messages(db_session, result.conversation_id)
        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert messages[-1].content == APOLOGY_MESSAGE

    @pytest.mark.asyncio
    async def test_prompt_contains_books_and_rules(self, db_session, test_user, cash_account):
        dispatcher, llm = _dispatcher("ok")

        await dispatcher.handle_message(db_session, test_user, ChatRequest(message="What accounts do I have?"))

        messages = llm.chat.call_args[0][0]
        assert messages[0]["role"] == "system"
        assert str(cash_account.id) in messages[0]["content"]
        assert "NEGATIVE" in messages[0]["content"]
        assert "CREATE_TRANSACTION" in messages[0]["content"]
        assert messages[-1] == {"role": "user", "content": "What accounts do I have?"}

    @pytest.mark.asyncio
    async def test_attachment_analysis_reaches_prompt(self, db_session, test_user):
        dispatcher, llm = _dispatcher("I see a receipt.")

        await dispatcher.handle_message(
            db_session, test_user,
            ChatRequest(message="Here is a receipt", attachments=[ChatAttachment(name="receipt.jpg")]),
        )

        system_prompt = llm.chat.call_args[0][0][0]["content"]
        assert "Attachment Analysis" in system_prompt
        assert "receipt.jpg" in system_prompt
        assert db_session.query(models.Transaction).count() == 0

    @pytest.mark.asyncio
    async def test_attachment_failure_is_not_fatal(self, db_session, test_user):
        extractor = AsyncMock()
        extractor.extract.side_effect = AttachmentExtractionError("unreadable")
        dispatcher, llm = _dispatcher("Could not read it, but here is my advice.", extractor=extractor)

        result = await dispatcher.handle_message(
            db_session, test_user,
            ChatRequest(message="Receipt", attachments=[ChatAttachment(name="blurry.png")]),
        )

        assert result.response == "Could not read it, but here is my advice."
        assert "Attachment Analysis" not in llm.chat.call_args[0][0][0]["content"]

    @pytest.mark.asyncio
    async def test_unexpected_failure_still_stores_apology(self, db_session, test_user):
        dispatcher, _ = _dispatcher(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await dispatcher.handle_message(db_session, test_user, ChatRequest(message="Hello"))

        conversation = db_session.query(models.Conversation).filter_by(user_id=test_user.id).one()
        messages = _messages(db_session, conversation.id)
        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert messages[-1].content == APOLOGY_MESSAGE
