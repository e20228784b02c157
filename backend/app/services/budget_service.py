import calendar
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status

from .. import models
from ..enums import BudgetType, BudgetStatus
from ..schemas import BudgetCreate, BudgetUpdate, BudgetResponse
from .budget_rollup_service import recompute_budget_spent
from .ledger_service import ensure_references, get_owned_or_404

logger = logging.getLogger(__name__)

WARNING_THRESHOLD = 80.0


def period_bounds(budget_type: BudgetType, today: Optional[date] = None) -> Tuple[date, date]:
    """First and last day of the calendar month, quarter or year containing today."""
    today = today or date.today()
    if budget_type == BudgetType.MONTHLY:
        start = today.replace(day=1)
        end = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    elif budget_type == BudgetType.QUARTERLY:
        first_month = 3 * ((today.month - 1) // 3) + 1
        last_month = first_month + 2
        start = date(today.year, first_month, 1)
        end = date(today.year, last_month, calendar.monthrange(today.year, last_month)[1])
    else:
        start = date(today.year, 1, 1)
        end = date(today.year, 12, 31)
    return start, end


def budget_progress(spent: Decimal, amount: Decimal) -> float:
    """Spent as a percentage of the limit, capped at 100."""
    if not amount:
        return 0.0
    return min(float(spent) / float(amount) * 100, 100.0)


def budget_status(spent: Decimal, amount: Decimal) -> BudgetStatus:
    progress = budget_progress(spent, amount)
    if progress >= 100:
        return BudgetStatus.OVER
    if progress >= WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.GOOD


class BudgetService:
    """Budget operations scoped to one user."""

    @staticmethod
    def create_budget(db: Session, user_id: UUID, data: BudgetCreate) -> models.Budget:
        ensure_references(db, user_id, account_id=data.account_id, category_id=data.category_id)

        default_start, default_end = period_bounds(data.budget_type)
        start_date = data.start_date or default_start
        end_date = data.end_date or default_end
        if end_date < start_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end_date must not be before start_date"
            )

        budget = models.Budget(
            user_id=user_id,
            name=data.name,
            amount=data.amount,
            budget_type=data.budget_type,
            category_id=data.category_id,
            account_id=data.account_id,
            start_date=start_date,
            end_date=end_date,
            spent_amount=Decimal("0"),
        )
        db.add(budget)
        try:
            db.flush()
            # Bring the new budget in line with transactions already recorded
            recompute_budget_spent(db, user_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(budget)

        logger.info(f"Created budget {budget.id} ({budget.name}) for user {user_id}")
        return budget

    @staticmethod
    def update_budget(db: Session, user_id: UUID, budget_id: UUID, data: BudgetUpdate) -> models.Budget:
        budget = get_owned_or_404(db, models.Budget, budget_id, user_id, "Budget")
        changes = data.model_dump(exclude_unset=True)
        ensure_references(
            db, user_id,
            account_id=changes.get("account_id"),
            category_id=changes.get("category_id"),
        )

        for field, value in changes.items():
            setattr(budget, field, value)
        if budget.end_date < budget.start_date:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end_date must not be before start_date"
            )

        try:
            db.flush()
            recompute_budget_spent(db, user_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(budget)
        return budget

    @staticmethod
    def list_budgets(db: Session, user_id: UUID) -> List[models.Budget]:
        return db.query(models.Budget).options(
            joinedload(models.Budget.category),
            joinedload(models.Budget.account),
        ).filter(
            models.Budget.user_id == user_id
        ).order_by(models.Budget.created_at.desc()).all()

    @staticmethod
    def recompute(db: Session, user_id: UUID) -> int:
        """Standalone recompute of the user's category budgets."""
        try:
            updated = recompute_budget_spent(db, user_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return updated

    @staticmethod
    def to_response(budget: models.Budget) -> BudgetResponse:
        spent = budget.spent_amount or Decimal("0")
        return BudgetResponse(
            id=budget.id,
            user_id=budget.user_id,
            name=budget.name,
            amount=budget.amount,
            spent_amount=spent,
            budget_type=budget.budget_type,
            category_id=budget.category_id,
            account_id=budget.account_id,
            category_name=budget.category.name if budget.category else None,
            account_name=budget.account.name if budget.account else None,
            start_date=budget.start_date,
            end_date=budget.end_date,
            is_active=budget.is_active,
            progress=budget_progress(spent, budget.amount),
            status=budget_status(spent, budget.amount),
            created_at=budget.created_at,
        )
