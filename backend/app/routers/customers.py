from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from .. import models, schemas
from ..dependencies import get_db, get_current_user
from ..services.ledger_service import CounterpartyService

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
)


@router.post("", response_model=schemas.CustomerResponse)
def create_customer(
    customer: schemas.CustomerCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Create a customer for the current user"""
    return CounterpartyService.create_customer(db, current_user.id, customer)


@router.get("", response_model=List[schemas.CustomerResponse])
def list_customers(
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """List customers, active ones first"""
    return CounterpartyService.list_customers(db, current_user.id, active_only=active_only)
