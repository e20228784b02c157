from enum import Enum


class AccountType(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

class TransactionStatus(str, Enum):
    PENDING = "pending"
    CLEARED = "cleared"
    RECONCILED = "reconciled"

class BudgetType(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

class CustomerType(str, Enum):
    CUSTOMER = "customer"
    CLIENT = "client"

class VendorType(str, Enum):
    VENDOR = "vendor"
    SUPPLIER = "supplier"

class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"

class ActionType(str, Enum):
    CREATE_TRANSACTION = "CREATE_TRANSACTION"
    UPDATE_TRANSACTION = "UPDATE_TRANSACTION"
    CREATE_BUDGET = "CREATE_BUDGET"
    CREATE_CATEGORY = "CREATE_CATEGORY"
    CREATE_ACCOUNT = "CREATE_ACCOUNT"
    CREATE_CUSTOMER = "CREATE_CUSTOMER"
    CREATE_VENDOR = "CREATE_VENDOR"

class BudgetStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    OVER = "over"
