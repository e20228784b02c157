from typing import List, Optional, Type, TypeVar
from uuid import UUID
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from .. import models
from ..models.category import DEFAULT_CATEGORY_COLOR
from ..schemas import AccountCreate, CategoryCreate, CustomerCreate, VendorCreate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def get_owned_or_404(db: Session, model: Type[ModelT], entity_id: UUID, user_id: UUID, label: str) -> ModelT:
    """
    Fetch a row by id scoped to its owner.
    Rows owned by someone else are reported exactly like missing ones.
    """
    obj = db.query(model).filter(model.id == entity_id, model.user_id == user_id).first()
    if obj is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} not found"
        )
    return obj


def ensure_references(
    db: Session,
    user_id: UUID,
    account_id: Optional[UUID] = None,
    category_id: Optional[UUID] = None,
    customer_id: Optional[UUID] = None,
    vendor_id: Optional[UUID] = None,
) -> None:
    """Check that every referenced id exists and belongs to user_id."""
    if account_id is not None:
        get_owned_or_404(db, models.Account, account_id, user_id, "Account")
    if category_id is not None:
        get_owned_or_404(db, models.Category, category_id, user_id, "Category")
    if customer_id is not None:
        get_owned_or_404(db, models.Customer, customer_id, user_id, "Customer")
    if vendor_id is not None:
        get_owned_or_404(db, models.Vendor, vendor_id, user_id, "Vendor")


def _commit_new(db: Session, obj, duplicate_detail: str):
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=duplicate_detail
        )
    db.refresh(obj)
    return obj


class AccountService:
    """Chart-of-accounts operations scoped to one user."""

    @staticmethod
    def list_accounts(db: Session, user_id: UUID, include_inactive: bool = False) -> List[models.Account]:
        query = db.query(models.Account).filter(models.Account.user_id == user_id)
        if not include_inactive:
            query = query.filter(models.Account.is_active.is_(True))
        return query.order_by(models.Account.code, models.Account.name).all()

    @staticmethod
    def create_account(db: Session, user_id: UUID, data: AccountCreate) -> models.Account:
        if data.code:
            existing = db.query(models.Account).filter(
                models.Account.user_id == user_id,
                models.Account.code == data.code
            ).first()
            if existing:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Account with code {data.code} already exists"
                )
        if data.parent_account_id is not None:
            get_owned_or_404(db, models.Account, data.parent_account_id, user_id, "Parent account")

        account = models.Account(
            user_id=user_id,
            name=data.name,
            code=data.code,
            account_type=data.account_type,
            parent_account_id=data.parent_account_id,
        )
        account = _commit_new(db, account, "Account with this code already exists")
        logger.info(f"Created account {account.id} ({account.name}) for user {user_id}")
        return account


class CategoryService:
    """Category operations scoped to one user."""

    @staticmethod
    def list_categories(db: Session, user_id: UUID) -> List[models.Category]:
        return db.query(models.Category).filter(
            models.Category.user_id == user_id
        ).order_by(models.Category.name).all()

    @staticmethod
    def create_category(db: Session, user_id: UUID, data: CategoryCreate) -> models.Category:
        # Check if a category with the same name already exists for this user
        existing = db.query(models.Category).filter(
            models.Category.user_id == user_id,
            models.Category.name == data.name
        ).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'Category "{data.name}" already exists'
            )

        category = models.Category(
            user_id=user_id,
            name=data.name,
            description=data.description,
            color=data.color or DEFAULT_CATEGORY_COLOR,
        )
        category = _commit_new(db, category, f'Category "{data.name}" already exists')
        logger.info(f"Created category {category.id} ({category.name}) for user {user_id}")
        return category


class CounterpartyService:
    """Customer and vendor operations; the two differ only in role."""

    @staticmethod
    def list_customers(db: Session, user_id: UUID, active_only: bool = False, limit: Optional[int] = None) -> List[models.Customer]:
        query = db.query(models.Customer).filter(models.Customer.user_id == user_id)
        if active_only:
            query = query.filter(models.Customer.is_active.is_(True))
        query = query.order_by(models.Customer.is_active.desc(), models.Customer.name)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def list_vendors(db: Session, user_id: UUID, active_only: bool = False, limit: Optional[int] = None) -> List[models.Vendor]:
        query = db.query(models.Vendor).filter(models.Vendor.user_id == user_id)
        if active_only:
            query = query.filter(models.Vendor.is_active.is_(True))
        query = query.order_by(models.Vendor.is_active.desc(), models.Vendor.name)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def create_customer(db: Session, user_id: UUID, data: CustomerCreate) -> models.Customer:
        customer = models.Customer(user_id=user_id, **data.model_dump())
        customer = _commit_new(db, customer, "Could not create customer")
        logger.info(f"Created customer {customer.id} ({customer.name}) for user {user_id}")
        return customer

    @staticmethod
    def create_vendor(db: Session, user_id: UUID, data: VendorCreate) -> models.Vendor:
        vendor = models.Vendor(user_id=user_id, **data.model_dump())
        vendor = _commit_new(db, vendor, "Could not create vendor")
        logger.info(f"Created vendor {vendor.id} ({vendor.name}) for user {user_id}")
        return vendor
