from datetime import timedelta
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from fastapi import HTTPException, status

from .. import models
from ..auth import (
    authenticate_user as auth_authenticate_user,
    create_user_with_defaults as auth_create_user_with_defaults,
    create_access_token as auth_create_access_token,
    ACCESS_TOKEN_EXPIRE_MINUTES
)
from ..schemas import SignupRequest, LoginRequest, SignupResponse, LoginResponse, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling authentication business logic."""

    @staticmethod
    def check_user_exists(db: Session, email: str) -> bool:
        """Check if a user with the given email already exists."""
        existing_user = db.query(models.User).filter(models.User.email == email).first()
        return existing_user is not None

    @staticmethod
    def create_access_token_for_user(user: models.User) -> str:
        """Create an access token for the given user."""
        access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        return auth_create_access_token(
            data={"sub": user.email, "user_id": str(user.id)},
            expires_delta=access_token_expires
        )

    @staticmethod
    def signup_user(db: Session, request: SignupRequest) -> SignupResponse:
        """
        Create a new user with the default chart of accounts and categories.

        Args:
            db: Database session
            request: Signup request data

        Returns:
            SignupResponse with user and access token

        Raises:
            HTTPException: If email already exists or creation fails
        """
        if AuthService.check_user_exists(db, request.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        try:
            user = auth_create_user_with_defaults(
                db=db,
                email=request.email,
                password=request.password,
                display_name=request.display_name,
                company_name=request.company_name
            )
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to create account for {request.email}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create account"
            )

        access_token = AuthService.create_access_token_for_user(user)

        return SignupResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            token_type="bearer"
        )

    @staticmethod
    def login_user(db: Session, request: LoginRequest) -> LoginResponse:
        """
        Authenticate user and return login response.

        Raises:
            HTTPException: If authentication fails
        """
        user = auth_authenticate_user(db, request.email, request.password)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        access_token = AuthService.create_access_token_for_user(user)

        return LoginResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            token_type="bearer"
        )
