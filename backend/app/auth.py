from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from .models import User, Account, Category
from .enums import AccountType
from .db import get_db
from .core.settings import get_settings

# Configuration
_settings = get_settings()
SECRET_KEY = _settings.secret_key
ALGORITHM = _settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = _settings.access_token_expire_minutes

# Chart of accounts and categories every new user starts with
DEFAULT_ACCOUNTS = [
    ("Cash", "1000", AccountType.ASSET),
    ("Bank Account", "1010", AccountType.ASSET),
    ("Accounts Receivable", "1200", AccountType.ASSET),
    ("Accounts Payable", "2000", AccountType.LIABILITY),
    ("Owner Equity", "3000", AccountType.EQUITY),
    ("Revenue", "4000", AccountType.REVENUE),
    ("Operating Expenses", "5000", AccountType.EXPENSE),
]

DEFAULT_CATEGORIES = [
    ("Office Supplies", "Office equipment and supplies", "#ef4444"),
    ("Travel", "Business travel expenses", "#f97316"),
    ("Marketing", "Marketing and advertising", "#8b5cf6"),
    ("Software", "Software subscriptions and licenses", "#06b6d4"),
    ("Utilities", "Office utilities", "#10b981"),
    ("Sales", "Revenue from sales", "#22c55e"),
    ("Services", "Revenue from services", "#3b82f6"),
]

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def verify_token(token: str) -> Optional[dict]:
    """Verify JWT token and return payload."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate user with email and password."""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user

def seed_default_books(db: Session, user: User) -> None:
    """Create the default accounts and categories for a freshly created user."""
    for name, code, account_type in DEFAULT_ACCOUNTS:
        db.add(Account(user_id=user.id, name=name, code=code, account_type=account_type))
    for name, description, color in DEFAULT_CATEGORIES:
        db.add(Category(user_id=user.id, name=name, description=description, color=color))

def create_user_with_defaults(
    db: Session,
    email: str,
    password: str,
    display_name: Optional[str] = None,
    company_name: Optional[str] = None,
) -> User:
    """Create a new user together with the default chart of accounts and categories."""
    hashed_password = get_password_hash(password)
    user = User(
        email=email,
        password_hash=hashed_password,
        display_name=display_name or email,
        company_name=company_name,
    )
    db.add(user)
    db.flush()  # Get the user ID without committing

    seed_default_books(db, user)
    db.commit()
    db.refresh(user)

    return user


# JWT Authentication
security = HTTPBearer()

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from JWT token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    email: str = payload.get("sub")
    if email is None:
        raise credentials_exception

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise credentials_exception

    return user
