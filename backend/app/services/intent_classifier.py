# backend/app/services/intent_classifier.py
from typing import Any, Dict, Optional, Protocol, Union
import logging

from ..schemas.actions import ActionCommand, UnknownAction
from .action_parser import parse_action_reply
from .context_service import FinancialContext
from .openai_llm_service import LLMClient
from .prompt_service import build_messages

logger = logging.getLogger(__name__)

Classification = Union[ActionCommand, UnknownAction, str]


class IntentClassifier(Protocol):
    async def classify(
        self,
        message: str,
        context: FinancialContext,
        attachment_analysis: Optional[Dict[str, Any]] = None,
    ) -> Classification: ...


class LLMIntentClassifier:
    """
    Classifies a user utterance by asking the language model.

    Prompt wording lives in prompt_service; reply interpretation lives in
    action_parser. Raises LLMServiceError when the model call fails and
    InvalidActionPayload when a catalog action carries bad data.
    """

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def classify(
        self,
        message: str,
        context: FinancialContext,
        attachment_analysis: Optional[Dict[str, Any]] = None,
    ) -> Classification:
        messages = build_messages(message, context, attachment_analysis)
        reply = await self.llm.chat(messages)
        logger.debug(f"AI Response: {reply}")
        return parse_action_reply(reply)
