from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from .. import models, schemas
from ..dependencies import get_db, get_current_user
from ..services.ledger_service import CounterpartyService

router = APIRouter(
    prefix="/vendors",
    tags=["Vendors"],
)


@router.post("", response_model=schemas.VendorResponse)
def create_vendor(
    vendor: schemas.VendorCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Create a vendor or supplier for the current user"""
    return CounterpartyService.create_vendor(db, current_user.id, vendor)


@router.get("", response_model=List[schemas.VendorResponse])
def list_vendors(
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """List vendors, active ones first"""
    return CounterpartyService.list_vendors(db, current_user.id, active_only=active_only)
