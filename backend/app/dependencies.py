from functools import lru_cache

# Re-export database dependency
from .db import get_db

# Re-export authentication dependency  
from .auth import get_current_user

from .core.settings import get_settings
from .services.accountant_service import AccountantDispatcher
from .services.attachment_service import PlaceholderAttachmentExtractor
from .services.intent_classifier import LLMIntentClassifier
from .services.openai_llm_service import OpenAILLMService


@lru_cache(maxsize=1)
def get_accountant_dispatcher() -> AccountantDispatcher:
    """
    Build the dispatcher and its model client once per process.
    Tests replace it through app.dependency_overrides.
    """
    llm = OpenAILLMService.from_settings(get_settings())
    return AccountantDispatcher(
        classifier=LLMIntentClassifier(llm),
        extractor=PlaceholderAttachmentExtractor(),
    )
