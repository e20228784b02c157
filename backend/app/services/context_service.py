from dataclasses import dataclass, field
from typing import Any, Dict, List
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from .. import models
from .ledger_service import CounterpartyService
from .transaction_service import TransactionService

logger = logging.getLogger(__name__)

CONTEXT_ENTITY_LIMIT = 10
CONTEXT_RECENT_TRANSACTIONS = 5


@dataclass
class FinancialContext:
    """What the model is told about the user's books. Advisory only."""
    accounts: List[Dict[str, Any]] = field(default_factory=list)
    categories: List[Dict[str, Any]] = field(default_factory=list)
    customers: List[Dict[str, Any]] = field(default_factory=list)
    vendors: List[Dict[str, Any]] = field(default_factory=list)
    recent_transactions: List[Dict[str, Any]] = field(default_factory=list)


def _transaction_summary(t: models.Transaction) -> Dict[str, Any]:
    return {
        "id": str(t.id),
        "date": t.transaction_date.isoformat() if t.transaction_date else None,
        "description": t.description,
        "amount": str(t.amount),
        "status": t.status.value if t.status else None,
        "account": t.account.name if t.account else None,
        "category": t.category.name if t.category else None,
        "customer": t.customer.name if t.customer else None,
        "vendor": t.vendor.name if t.vendor else None,
    }


class FinancialContextService:
    """Gathers the bounded snapshot of a user's books shown to the model."""

    @staticmethod
    def gather(db: Session, user_id: UUID) -> FinancialContext:
        accounts = db.query(models.Account).filter(
            models.Account.user_id == user_id
        ).order_by(models.Account.code).limit(CONTEXT_ENTITY_LIMIT).all()
        categories = db.query(models.Category).filter(
            models.Category.user_id == user_id
        ).order_by(models.Category.name).limit(CONTEXT_ENTITY_LIMIT).all()
        customers = CounterpartyService.list_customers(db, user_id, active_only=True, limit=CONTEXT_ENTITY_LIMIT)
        vendors = CounterpartyService.list_vendors(db, user_id, active_only=True, limit=CONTEXT_ENTITY_LIMIT)
        recent = TransactionService.recent_transactions(db, user_id, limit=CONTEXT_RECENT_TRANSACTIONS)

        context = FinancialContext(
            accounts=[
                {"id": str(a.id), "name": a.name, "type": a.account_type.value, "code": a.code}
                for a in accounts
            ],
            categories=[
                {"id": str(c.id), "name": c.name, "color": c.color}
                for c in categories
            ],
            customers=[{"id": str(c.id), "name": c.name} for c in customers],
            vendors=[{"id": str(v.id), "name": v.name} for v in vendors],
            recent_transactions=[_transaction_summary(t) for t in recent],
        )
        logger.debug(
            f"Context for user {user_id}: {len(context.accounts)} accounts, "
            f"{len(context.categories)} categories, {len(context.recent_transactions)} recent transactions"
        )
        return context
