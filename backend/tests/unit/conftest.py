# backend/tests/unit/conftest.py
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models
from app.main import app
from app.db import Base, get_db
from app.enums import BudgetType
from app.auth import create_access_token, create_user_with_defaults


@pytest.fixture
def engine():
    """
    Fresh in-memory database per test. Services commit and roll back on their
    own, so each test gets its own schema rather than an outer transaction.
    """
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enforce FKs in SQLite (off by default otherwise)
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _override_get_db(db_session):
    def _get_db():
        yield db_session
    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def test_user(db_session):
    """A signed-up user with the default chart of accounts and categories"""
    return create_user_with_defaults(
        db_session,
        email="owner@example.com",
        password="testpass123",
        display_name="Owner",
        company_name="Owner Co",
    )


@pytest.fixture
def other_user(db_session):
    """A second user for isolation checks"""
    return create_user_with_defaults(db_session, email="other@example.com", password="otherpass123")


@pytest.fixture
def auth_headers(test_user):
    token = create_access_token(data={"sub": test_user.email, "user_id": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def cash_account(db_session, test_user):
    return db_session.query(models.Account).filter_by(user_id=test_user.id, code="1000").one()


@pytest.fixture
def expense_account(db_session, test_user):
    return db_session.query(models.Account).filter_by(user_id=test_user.id, code="5000").one()


@pytest.fixture
def travel_category(db_session, test_user):
    return db_session.query(models.Category).filter_by(user_id=test_user.id, name="Travel").one()


@pytest.fixture
def travel_budget(db_session, test_user, travel_category):
    """Monthly travel budget over January 2024"""
    budget = models.Budget(
        user_id=test_user.id,
        name="Travel January",
        category_id=travel_category.id,
        budget_type=BudgetType.MONTHLY,
        amount=Decimal("500.00"),
        spent_amount=Decimal("0"),
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
    )
    db_session.add(budget)
    db_session.commit()
    db_session.refresh(budget)
    return budget
