from pydantic import BaseModel
from typing import List
from decimal import Decimal
from .transaction import TransactionResponse


class FinancialSummary(BaseModel):
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal
    total_assets: Decimal


class DashboardResponse(BaseModel):
    summary: FinancialSummary
    recent_transactions: List[TransactionResponse]
