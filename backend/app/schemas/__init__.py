# Auth schemas
from .auth import (
    SignupRequest,
    LoginRequest,
    Token,
    UserResponse,
    SignupResponse,
    LoginResponse
)

# Bookkeeping entity schemas
from .account import AccountCreate, AccountResponse
from .category import CategoryCreate, CategoryResponse
from .counterparty import CustomerCreate, CustomerResponse, VendorCreate, VendorResponse
from .transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse
)
from .budget import BudgetCreate, BudgetUpdate, BudgetResponse, BudgetRecomputeResponse
from .dashboard import FinancialSummary, DashboardResponse

# Chat schemas
from .conversation import ConversationCreate, ConversationResponse, MessageResponse
from .chat import ChatAttachment, ChatRequest, ChatResponse, ChatErrorResponse

# Make all schemas available at package level
__all__ = [
    # Auth
    "SignupRequest",
    "LoginRequest",
    "Token",
    "UserResponse",
    "SignupResponse",
    "LoginResponse",
    # Entities
    "AccountCreate",
    "AccountResponse",
    "CategoryCreate",
    "CategoryResponse",
    "CustomerCreate",
    "CustomerResponse",
    "VendorCreate",
    "VendorResponse",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "TransactionListResponse",
    "BudgetCreate",
    "BudgetUpdate",
    "BudgetResponse",
    "BudgetRecomputeResponse",
    "FinancialSummary",
    "DashboardResponse",
    # Chat
    "ConversationCreate",
    "ConversationResponse",
    "MessageResponse",
    "ChatAttachment",
    "ChatRequest",
    "ChatResponse",
    "ChatErrorResponse",
]
