"""
Attachment pre-processing for chat messages.

Real document parsing (OCR of receipts and invoices) is an external
collaborator. The extractor contract is: given the attachments of one message,
return a structured guess of transaction fields, or None when nothing could be
read. The guess is only shown to the model as extra context; it is never
written to the books directly.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID
import logging

from ..schemas import ChatAttachment

logger = logging.getLogger(__name__)


class AttachmentExtractionError(Exception):
    """Raised when an extractor cannot read the attachments it was given"""
    pass


class AttachmentExtractor(Protocol):
    async def extract(self, attachments: List[ChatAttachment], user_id: UUID) -> Optional[Dict[str, Any]]: ...


class PlaceholderAttachmentExtractor:
    """
    Stand-in extractor that returns a fixed receipt guess for any attachments.
    Swap in a document-intelligence backed extractor to read real files.
    """

    async def extract(self, attachments: List[ChatAttachment], user_id: UUID) -> Optional[Dict[str, Any]]:
        if not attachments:
            return None

        logger.info(f"Processing {len(attachments)} attachments for user {user_id}")
        return {
            "detected_transactions": [
                {
                    "amount": 150.00,
                    "description": "Office supplies from receipt",
                    "vendor": "Office Depot",
                    "date": date.today().isoformat(),
                }
            ],
            "source_files": [a.name for a in attachments],
        }
