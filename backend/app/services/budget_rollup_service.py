"""
Budget rollup: keeps ``Budget.spent_amount`` equal to the spend it tracks.

For every budget with a category, spent_amount is

    SUM(|t.amount|) over the owner's transactions t
    where t.category_id = budget.category_id
      and t.transaction_date between budget.start_date and budget.end_date
      and t.amount < 0

Each budget is evaluated against its own window. Recomputation reads the full
current transaction set, so it is idempotent.

Concurrent writers for the same user are serialized on that user's row before
the UPDATE runs. Under READ COMMITTED the UPDATE then starts with a snapshot
that includes every transaction committed by the writer that held the lock,
so no contribution is lost whatever order the writes commit in.

Transaction writes call ``recompute_budget_spent`` after flushing and before
committing, so the write and the recompute succeed or fail together.
"""
import logging
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ..models import Budget, Transaction, User

logger = logging.getLogger(__name__)


def lock_user_rollup(db: Session, user_id: UUID) -> None:
    """
    Hold the user's row until the caller's transaction ends.

    FOR NO KEY UPDATE conflicts with itself but not with the KEY SHARE locks
    taken by foreign key checks, so inserts referencing the user still proceed.
    SQLite renders no locking clause; it serializes writers on its own.
    """
    db.execute(
        select(User.id).where(User.id == user_id).with_for_update(key_share=True)
    )


def _spent_subquery():
    """Correlated scalar subquery computing spend for the budget row being updated."""
    return (
        select(func.coalesce(func.sum(func.abs(Transaction.amount)), 0))
        .where(
            Transaction.category_id == Budget.category_id,
            Transaction.user_id == Budget.user_id,
            Transaction.transaction_date.between(Budget.start_date, Budget.end_date),
            Transaction.amount < 0,
        )
        .scalar_subquery()
    )


def recompute_budget_spent(db: Session, user_id: UUID) -> int:
    """
    Recompute spent_amount for every category-scoped budget owned by user_id.

    Runs inside the caller's transaction and does not commit. Budgets without a
    category are left untouched, and other users' budgets are never read or
    written.

    Returns:
        Number of budgets updated
    """
    lock_user_rollup(db, user_id)
    result = db.execute(
        update(Budget)
        .where(Budget.user_id == user_id, Budget.category_id.is_not(None))
        .values(spent_amount=_spent_subquery())
        .execution_options(synchronize_session=False)
    )
    _expire_cached_budgets(db)
    logger.debug(f"Recomputed spent_amount for {result.rowcount} budgets of user {user_id}")
    return result.rowcount


def expected_spent(db: Session, budget: Budget) -> Decimal:
    """Spend a single budget should currently show, computed straight from transactions."""
    if budget.category_id is None:
        return Decimal("0")
    total = db.execute(
        select(func.coalesce(func.sum(func.abs(Transaction.amount)), 0)).where(
            Transaction.category_id == budget.category_id,
            Transaction.user_id == budget.user_id,
            Transaction.transaction_date.between(budget.start_date, budget.end_date),
            Transaction.amount < 0,
        )
    ).scalar_one()
    return Decimal(str(total)).quantize(Decimal("0.01"))


def users_with_category_budgets(db: Session) -> Iterable[UUID]:
    """Owners of at least one category-scoped budget."""
    return db.execute(
        select(Budget.user_id).where(Budget.category_id.is_not(None)).distinct()
    ).scalars().all()


def reconcile_all_budgets(db: Session) -> int:
    """
    Recompute every user's category budgets and commit.

    Safe to run at any time; used by the periodic reconciliation task to
    re-converge spent_amount if a write ever bypassed the rollup.
    """
    updated = 0
    for user_id in users_with_category_budgets(db):
        updated += recompute_budget_spent(db, user_id)
    db.commit()
    logger.info(f"Budget reconciliation updated {updated} budgets")
    return updated


def _expire_cached_budgets(db: Session) -> None:
    # The UPDATE bypasses the identity map; drop stale spent_amount values
    for obj in list(db.identity_map.values()):
        if isinstance(obj, Budget):
            db.expire(obj, ["spent_amount"])
