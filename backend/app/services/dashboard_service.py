from decimal import Decimal
from uuid import UUID

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from .. import models
from ..enums import AccountType
from ..schemas import DashboardResponse, FinancialSummary
from .transaction_service import TransactionService

RECENT_TRANSACTIONS_LIMIT = 10


class DashboardService:
    """Read-only rollups for the accounting dashboard."""

    @staticmethod
    def financial_summary(db: Session, user_id: UUID) -> FinancialSummary:
        """
        Totals over all of the user's transactions:
        - expenses: sum of |amount| for negative amounts
        - revenue: positive amounts on revenue accounts
        - assets: positive amounts on asset accounts
        """
        t = models.Transaction
        a = models.Account
        zero = Decimal("0")
        expenses, revenue, assets = db.query(
            func.coalesce(func.sum(case((t.amount < 0, -t.amount), else_=0)), 0),
            func.coalesce(func.sum(case(((t.amount > 0) & (a.account_type == AccountType.REVENUE), t.amount), else_=0)), 0),
            func.coalesce(func.sum(case(((t.amount > 0) & (a.account_type == AccountType.ASSET), t.amount), else_=0)), 0),
        ).select_from(t).join(a, t.account_id == a.id).filter(t.user_id == user_id).one()

        total_expenses = Decimal(str(expenses or zero)).quantize(Decimal("0.01"))
        total_revenue = Decimal(str(revenue or zero)).quantize(Decimal("0.01"))
        total_assets = Decimal(str(assets or zero)).quantize(Decimal("0.01"))
        return FinancialSummary(
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            net_income=total_revenue - total_expenses,
            total_assets=total_assets,
        )

    @staticmethod
    def dashboard(db: Session, user_id: UUID) -> DashboardResponse:
        transactions, _ = TransactionService.list_transactions(db, user_id, limit=RECENT_TRANSACTIONS_LIMIT)
        return DashboardResponse(
            summary=DashboardService.financial_summary(db, user_id),
            recent_transactions=[TransactionService.to_response(tx) for tx in transactions],
        )
