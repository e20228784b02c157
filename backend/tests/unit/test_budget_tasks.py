from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app import models
from app.schemas import TransactionCreate
from app.services.transaction_service import TransactionService
from app.tasks.budget_tasks import reconcile_budgets


@pytest.fixture
def task_db(db_session):
    """Point the task's get_db at the test session"""
    def _get_db():
        yield db_session
    with patch("app.tasks.budget_tasks.get_db", _get_db), patch.object(db_session, "close"):
        yield db_session


class TestReconcileBudgetsTask:

    def test_reconciles_all_users(self, task_db, test_user, cash_account, travel_category, travel_budget):
        TransactionService.create_transaction(
            task_db, test_user.id,
            TransactionCreate(
                description="Train", amount=Decimal("-60"), account_id=cash_account.id,
                category_id=travel_category.id, transaction_date=date(2024, 1, 5),
            ),
        )
        travel_budget.spent_amount = Decimal("0")
        task_db.commit()

        result = reconcile_budgets.run()

        assert result == {"user_id": None, "budgets_updated": 1}
        task_db.refresh(travel_budget)
        assert travel_budget.spent_amount == Decimal("60.00")

    def test_reconciles_single_user(self, task_db, test_user, travel_budget):
        travel_budget.spent_amount = Decimal("5")
        task_db.commit()

        result = reconcile_budgets.run(user_id=str(test_user.id))

        assert result["budgets_updated"] == 1
        task_db.refresh(travel_budget)
        assert travel_budget.spent_amount == Decimal("0.00")

    def test_database_error_is_retried(self, task_db, test_user):
        error = OperationalError("SELECT 1", {}, Exception("connection lost"))
        with patch("app.tasks.budget_tasks.reconcile_all_budgets", side_effect=error), \
                patch.object(reconcile_budgets, "retry", side_effect=RuntimeError("retrying")) as mock_retry:
            with pytest.raises(RuntimeError, match="retrying"):
                reconcile_budgets.run()

        assert mock_retry.call_args.kwargs["exc"] is error

    def test_beat_schedule_registered(self):
        from app.core.celery import celery_app
        entry = celery_app.conf.beat_schedule["reconcile-budget-spent"]
        assert entry["task"] == "app.tasks.budget_tasks.reconcile_budgets"
