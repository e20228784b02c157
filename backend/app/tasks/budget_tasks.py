import logging
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.core.celery import celery_app
from app.db import get_db
from app.services.budget_rollup_service import reconcile_all_budgets, recompute_budget_spent

logger = logging.getLogger(__name__)


@celery_app.task(bind=True)
def reconcile_budgets(self, user_id: Optional[str] = None) -> dict:
    """
    Recompute budget spent_amount from the transaction set.

    With no user_id every user owning a category budget is reconciled. The
    recompute is idempotent, so retries and overlapping runs are harmless.

    Returns:
        Dictionary with the number of budgets updated
    """
    db = None
    try:
        db = next(get_db())
        if user_id is None:
            updated = reconcile_all_budgets(db)
        else:
            updated = recompute_budget_spent(db, uuid.UUID(user_id))
            db.commit()

        logger.info(f"Budget reconciliation finished (user={user_id or 'all'}): {updated} budgets updated")
        return {"user_id": user_id, "budgets_updated": updated}

    except SQLAlchemyError as exc:
        logger.error(f"Budget reconciliation failed (user={user_id or 'all'}): {exc}")
        if db:
            db.rollback()
        raise self.retry(exc=exc, countdown=60, max_retries=3)

    finally:
        if db:
            db.close()

