from datetime import date
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status

from .. import models
from ..schemas import TransactionCreate, TransactionUpdate, TransactionResponse
from .budget_rollup_service import recompute_budget_spent
from .ledger_service import ensure_references, get_owned_or_404

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Transaction writes for one user.

    Every create, update and delete flushes the change, recomputes the owner's
    budget spend in the same database transaction, then commits. If anything
    fails the session is rolled back so spent_amount never drifts from the
    transaction set.
    """

    @staticmethod
    def _commit_with_rollup(db: Session, user_id: UUID) -> None:
        try:
            db.flush()
            recompute_budget_spent(db, user_id)
            db.commit()
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def create_transaction(db: Session, user_id: UUID, data: TransactionCreate) -> models.Transaction:
        ensure_references(
            db, user_id,
            account_id=data.account_id,
            category_id=data.category_id,
            customer_id=data.customer_id,
            vendor_id=data.vendor_id,
        )
        if data.conversation_id is not None:
            get_owned_or_404(db, models.Conversation, data.conversation_id, user_id, "Conversation")

        transaction = models.Transaction(
            user_id=user_id,
            description=data.description,
            amount=data.amount,
            transaction_date=data.transaction_date or date.today(),
            account_id=data.account_id,
            category_id=data.category_id,
            customer_id=data.customer_id,
            vendor_id=data.vendor_id,
            status=data.status,
            reference_number=data.reference_number,
            notes=data.notes,
            conversation_id=data.conversation_id,
        )
        db.add(transaction)
        TransactionService._commit_with_rollup(db, user_id)
        db.refresh(transaction)

        logger.info(f"Recorded transaction {transaction.id} amount={transaction.amount} for user {user_id}")
        return transaction

    @staticmethod
    def update_transaction(db: Session, user_id: UUID, transaction_id: UUID, data: TransactionUpdate) -> models.Transaction:
        transaction = get_owned_or_404(db, models.Transaction, transaction_id, user_id, "Transaction")

        changes = data.model_dump(exclude_unset=True)
        if changes.get("account_id") is None and "account_id" in changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="account_id cannot be cleared"
            )
        ensure_references(
            db, user_id,
            account_id=changes.get("account_id"),
            category_id=changes.get("category_id"),
            customer_id=changes.get("customer_id"),
            vendor_id=changes.get("vendor_id"),
        )

        for field, value in changes.items():
            setattr(transaction, field, value)
        TransactionService._commit_with_rollup(db, user_id)
        db.refresh(transaction)

        logger.info(f"Updated transaction {transaction.id} fields={sorted(changes)} for user {user_id}")
        return transaction

    @staticmethod
    def delete_transaction(db: Session, user_id: UUID, transaction_id: UUID) -> None:
        transaction = get_owned_or_404(db, models.Transaction, transaction_id, user_id, "Transaction")
        db.delete(transaction)
        TransactionService._commit_with_rollup(db, user_id)
        logger.info(f"Deleted transaction {transaction_id} for user {user_id}")

    @staticmethod
    def list_transactions(
        db: Session,
        user_id: UUID,
        limit: int = 50,
        offset: int = 0,
        category_id: Optional[UUID] = None,
        account_id: Optional[UUID] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[List[models.Transaction], int]:
        query = db.query(models.Transaction).filter(models.Transaction.user_id == user_id)
        if category_id is not None:
            query = query.filter(models.Transaction.category_id == category_id)
        if account_id is not None:
            query = query.filter(models.Transaction.account_id == account_id)
        if start_date is not None:
            query = query.filter(models.Transaction.transaction_date >= start_date)
        if end_date is not None:
            query = query.filter(models.Transaction.transaction_date <= end_date)

        total = query.count()
        transactions = query.options(
            joinedload(models.Transaction.account),
            joinedload(models.Transaction.category),
            joinedload(models.Transaction.customer),
            joinedload(models.Transaction.vendor),
        ).order_by(
            models.Transaction.transaction_date.desc(),
            models.Transaction.created_at.desc()
        ).offset(offset).limit(limit).all()
        return transactions, total

    @staticmethod
    def recent_transactions(db: Session, user_id: UUID, limit: int = 5) -> List[models.Transaction]:
        """Most recently recorded transactions with their related rows loaded."""
        return db.query(models.Transaction).options(
            joinedload(models.Transaction.account),
            joinedload(models.Transaction.category),
            joinedload(models.Transaction.customer),
            joinedload(models.Transaction.vendor),
        ).filter(
            models.Transaction.user_id == user_id
        ).order_by(models.Transaction.created_at.desc()).limit(limit).all()

    @staticmethod
    def to_response(transaction: models.Transaction) -> TransactionResponse:
        """Build a response including the names of related rows"""
        response = TransactionResponse.model_validate(transaction)
        response.account_name = transaction.account.name if transaction.account else None
        response.category_name = transaction.category.name if transaction.category else None
        response.customer_name = transaction.customer.name if transaction.customer else None
        response.vendor_name = transaction.vendor.name if transaction.vendor else None
        return response
