from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from .. import models, schemas
from ..dependencies import get_db, get_current_user
from ..services.budget_service import BudgetService

router = APIRouter(
    prefix="/budgets",
    tags=["Budgets"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=schemas.BudgetResponse)
def create_budget(
    budget: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Create a budget; the window defaults to the current period of budget_type"""
    created = BudgetService.create_budget(db, current_user.id, budget)
    return BudgetService.to_response(created)


@router.get("", response_model=List[schemas.BudgetResponse])
def list_budgets(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """List budgets with progress and status"""
    return [BudgetService.to_response(b) for b in BudgetService.list_budgets(db, current_user.id)]


@router.patch("/{budget_id}", response_model=schemas.BudgetResponse)
def update_budget(
    budget_id: UUID,
    changes: schemas.BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Update a budget; spend is recomputed against the new window"""
    updated = BudgetService.update_budget(db, current_user.id, budget_id, changes)
    return BudgetService.to_response(updated)


@router.post("/recompute", response_model=schemas.BudgetRecomputeResponse)
def recompute_budgets(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Recompute spent_amount for all of the current user's category budgets"""
    return schemas.BudgetRecomputeResponse(budgets_updated=BudgetService.recompute(db, current_user.id))
