# backend/app/services/openai_llm_service.py
from typing import List, Dict, Optional, Protocol
from openai import AsyncOpenAI, OpenAIError
import anyio
import logging

from ..core.settings import Settings

logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Raised when the chat-completion endpoint cannot produce a reply"""
    pass


class LLMClient(Protocol):
    async def chat(self, messages: List[Dict[str, str]]) -> str: ...


class OpenAILLMService:
    """
    Chat-completion client for any OpenAI-compatible endpoint (OpenRouter by default).
    Conforms to the LLMClient protocol.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "google/gemma-3-27b-it",
        temperature: float = 0.7,
        max_tokens: int = 1500,
        timeout_seconds: Optional[float] = 30.0,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAILLMService":
        """Build the service and its HTTP client from application settings"""
        client = AsyncOpenAI(
            # The SDK refuses to build without a key; a missing key surfaces as an auth failure per call
            api_key=settings.llm_api_key or "missing-api-key",
            base_url=settings.llm_base_url,
            default_headers=settings.llm_default_headers,
            timeout=settings.llm_timeout_seconds,
            max_retries=1,
        )
        return cls(
            client=client,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout_seconds=settings.llm_timeout_seconds,
        )

    async def chat(self, messages: List[Dict[str, str]]) -> str:
        """
        Send messages and return the reply text.

        Raises:
            LLMServiceError: on transport, auth, quota or timeout failures, or an empty reply
        """
        openai_messages = [{"role": msg["role"], "content": msg["content"]} for msg in messages]

        try:
            with anyio.fail_after(self.timeout_seconds):
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=openai_messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
        except TimeoutError as e:
            logger.error(f"LLM call timed out after {self.timeout_seconds}s")
            raise LLMServiceError(f"Model call timed out after {self.timeout_seconds}s") from e
        except OpenAIError as e:
            logger.error(f"OpenAI LLM Error: {e}")
            raise LLMServiceError(str(e)) from e

        if not response.choices:
            raise LLMServiceError("Model returned no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            logger.warning("Empty response from LLM")
            raise LLMServiceError("Model returned an empty reply")

        return content.strip()
