"""
Budget rollup against PostgreSQL. Run with:

    TEST_DATABASE_URL=postgresql+psycopg2://... pytest -m integration
"""
import threading
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import delete

from app import models
from app.auth import create_user_with_defaults
from app.enums import BudgetType
from app.schemas import TransactionCreate, TransactionUpdate
from app.services.budget_rollup_service import expected_spent, recompute_budget_spent
from app.services.transaction_service import TransactionService

pytestmark = pytest.mark.integration


@pytest.fixture
def books(db_session, test_user):
    cash = db_session.query(models.Account).filter_by(user_id=test_user.id, code="1000").one()
    travel = db_session.query(models.Category).filter_by(user_id=test_user.id, name="Travel").one()
    budget = models.Budget(
        user_id=test_user.id, name="Travel Q1", category_id=travel.id, budget_type=BudgetType.QUARTERLY,
        amount=Decimal("1000.00"), start_date=date(2024, 1, 1), end_date=date(2024, 3, 31),
    )
    db_session.add(budget)
    db_session.commit()
    return cash, travel, budget


def test_spent_amount_matches_ledger_after_each_write(db_session, test_user, books):
    cash, travel, budget = books
    writes = []
    for amount, on in (("-10.10", date(2024, 1, 2)), ("-20.20", date(2024, 3, 31)), ("15.00", date(2024, 2, 1))):
        writes.append(TransactionService.create_transaction(
            db_session, test_user.id,
            TransactionCreate(description="x", amount=Decimal(amount), account_id=cash.id,
                              category_id=travel.id, transaction_date=on),
        ))
        db_session.refresh(budget)
        assert budget.spent_amount == expected_spent(db_session, budget)

    assert budget.spent_amount == Decimal("30.30")

    TransactionService.update_transaction(
        db_session, test_user.id, writes[0].id, TransactionUpdate(transaction_date=date(2024, 4, 1))
    )
    db_session.refresh(budget)
    assert budget.spent_amount == Decimal("20.20")

    TransactionService.delete_transaction(db_session, test_user.id, writes[1].id)
    db_session.refresh(budget)
    assert budget.spent_amount == Decimal("0.00")


def test_budget_endpoint_on_postgres(client, auth_headers, books):
    cash, travel, _ = books
    response = client.post("/transactions", headers=auth_headers, json={
        "description": "Flight", "amount": "-250", "account_id": str(cash.id),
        "category_id": str(travel.id), "transaction_date": "2024-02-14",
    })
    assert response.status_code == 200

    budgets = client.get("/budgets", headers=auth_headers).json()
    assert budgets[0]["spent_amount"] == "250.00"


@pytest.fixture
def committed_books(session_factory):
    """Books committed for real, so two independent sessions can see them."""
    setup = session_factory()
    user = create_user_with_defaults(setup, email="pg-concurrent@example.com", password="testpass123")
    cash = setup.query(models.Account).filter_by(user_id=user.id, code="1000").one()
    travel = setup.query(models.Category).filter_by(user_id=user.id, name="Travel").one()
    budget = models.Budget(
        user_id=user.id, name="Travel January", category_id=travel.id, budget_type=BudgetType.MONTHLY,
        amount=Decimal("500.00"), start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
    )
    setup.add(budget)
    setup.commit()
    ids = (user.id, cash.id, travel.id, budget.id)
    setup.close()
    try:
        yield ids
    finally:
        cleanup = session_factory()
        cleanup.execute(delete(models.Transaction).where(models.Transaction.user_id == ids[0]))
        cleanup.execute(delete(models.Budget).where(models.Budget.user_id == ids[0]))
        cleanup.execute(delete(models.User).where(models.User.id == ids[0]))
        cleanup.commit()
        cleanup.close()


def test_concurrent_writes_keep_every_contribution(session_factory, committed_books):
    user_id, cash_id, travel_id, budget_id = committed_books

    first = session_factory()
    first.add(models.Transaction(
        user_id=user_id, description="Taxi", amount=Decimal("-10.00"), account_id=cash_id,
        category_id=travel_id, transaction_date=date(2024, 1, 10),
    ))
    first.flush()
    # Holds the user's rollup lock until commit
    recompute_budget_spent(first, user_id)

    errors = []

    def second_writer():
        second = session_factory()
        try:
            TransactionService.create_transaction(second, user_id, TransactionCreate(
                description="Train", amount=Decimal("-20.00"), account_id=cash_id,
                category_id=travel_id, transaction_date=date(2024, 1, 12),
            ))
        except Exception as e:
            errors.append(e)
        finally:
            second.close()

    thread = threading.Thread(target=second_writer, daemon=True)
    thread.start()
    try:
        thread.join(timeout=1)
        assert thread.is_alive(), "second writer should wait for the first one's lock"
        first.commit()
    finally:
        first.close()
    thread.join(timeout=10)
    assert not thread.is_alive()
    assert errors == []

    check = session_factory()
    try:
        budget = check.get(models.Budget, budget_id)
        assert budget.spent_amount == Decimal("30.00")
        assert budget.spent_amount == expected_spent(check, budget)
    finally:
        check.close()
