# Import and re-export all models so `from app import models` exposes them
# and Base.metadata sees every table.

# Import Base from db module
from ..db import Base

# Import all models from their individual files
from .user import User
from .account import Account
from .category import Category
from .customer import Customer
from .vendor import Vendor
from .conversation import Conversation
from .message import Message
from .transaction import Transaction
from .budget import Budget

# Ensure all models are available at package level
__all__ = [
    "Base",
    "User",
    "Account",
    "Category",
    "Customer",
    "Vendor",
    "Conversation",
    "Message",
    "Transaction",
    "Budget",
]
