from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from .. import models, schemas
from ..dependencies import get_db, get_current_user
from ..services.transaction_service import TransactionService

router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=schemas.TransactionResponse)
def create_transaction(
    transaction: schemas.TransactionCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """
    Record a transaction. Negative amounts are expenses.
    Budget spend for the user is recomputed as part of the same write.
    """
    created = TransactionService.create_transaction(db, current_user.id, transaction)
    return TransactionService.to_response(created)


@router.get("", response_model=schemas.TransactionListResponse)
def list_transactions(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    category_id: Optional[UUID] = Query(None),
    account_id: Optional[UUID] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """List transactions, newest first, with related account/category/customer/vendor names"""
    transactions, total = TransactionService.list_transactions(
        db,
        current_user.id,
        limit=limit,
        offset=offset,
        category_id=category_id,
        account_id=account_id,
        start_date=start_date,
        end_date=end_date,
    )
    return schemas.TransactionListResponse(
        transactions=[TransactionService.to_response(t) for t in transactions],
        total=total,
    )


@router.patch("/{transaction_id}", response_model=schemas.TransactionResponse)
def update_transaction(
    transaction_id: UUID,
    changes: schemas.TransactionUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Update the given fields of a transaction"""
    updated = TransactionService.update_transaction(db, current_user.id, transaction_id, changes)
    return TransactionService.to_response(updated)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Delete a transaction"""
    TransactionService.delete_transaction(db, current_user.id, transaction_id)
