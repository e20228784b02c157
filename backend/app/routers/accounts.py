from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from .. import models, schemas
from ..dependencies import get_db, get_current_user
from ..services.ledger_service import AccountService

router = APIRouter(
    prefix="/accounts",
    tags=["Accounts"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=schemas.AccountResponse)
def create_account(
    account: schemas.AccountCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Create a new account in the current user's chart of accounts"""
    return AccountService.create_account(db, current_user.id, account)


@router.get("", response_model=List[schemas.AccountResponse])
def list_accounts(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """List the current user's accounts ordered by code"""
    return AccountService.list_accounts(db, current_user.id, include_inactive=include_inactive)
