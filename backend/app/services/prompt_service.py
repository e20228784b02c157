# backend/app/services/prompt_service.py
import json
from typing import Any, Dict, List, Optional

from .context_service import FinancialContext

SYSTEM_RULES = """You are an AI Accounting Assistant. You can perform actual database operations to help users manage their finances.

Sign convention:
- Expenses are NEGATIVE amounts (e.g. a $25 taxi ride is -25).
- Income and revenue are POSITIVE amounts.
- Use only ids that appear in the context below. Never invent ids.
"""

ACTION_CATALOG = """You can perform these actions:
1. CREATE_TRANSACTION - Record a new transaction
   data: amount, description, account_id, category_id, customer_id, vendor_id, transaction_date (YYYY-MM-DD), notes
2. UPDATE_TRANSACTION - Modify an existing transaction
   data: transaction_id plus any of amount, description, account_id, category_id, transaction_date, status, notes
3. CREATE_BUDGET - Set up a budget
   data: name, amount, budget_type (monthly|quarterly|yearly), category_id, account_id, start_date, end_date
4. CREATE_CATEGORY - Add a new category
   data: name, description, color
5. CREATE_ACCOUNT - Add a new account
   data: name, account_type (asset|liability|equity|revenue|expense), code
6. CREATE_CUSTOMER - Add a customer
   data: name, email, phone, company_name, address, payment_terms, credit_limit, notes
7. CREATE_VENDOR - Add a vendor or supplier
   data: name, email, phone, company_name, address, payment_terms, credit_limit, notes

When the user asks you to record something or perform one of these actions, reply with ONLY a JSON object:
{
  "action": "ACTION_TYPE",
  "data": { /* fields listed above */ },
  "response": "Human readable response"
}

If you cannot perform an action or need more information, just provide a helpful response without the action structure."""


def _dump(value: Any) -> str:
    return json.dumps(value, default=str)


def build_system_prompt(context: FinancialContext, attachment_analysis: Optional[Dict[str, Any]] = None) -> str:
    """Render the system prompt: rules, the user's books, optional attachment guess, action catalog."""
    sections = [
        SYSTEM_RULES,
        f"Available accounts: {_dump(context.accounts)}",
        f"Available categories: {_dump(context.categories)}",
        f"Active customers: {_dump(context.customers)}",
        f"Active vendors: {_dump(context.vendors)}",
        f"Recent transactions: {_dump(context.recent_transactions)}",
    ]
    if attachment_analysis:
        sections.append(f"Attachment Analysis:\n{json.dumps(attachment_analysis, indent=2, default=str)}")
    sections.append(ACTION_CATALOG)
    return "\n\n".join(sections)


def build_messages(message: str, context: FinancialContext, attachment_analysis: Optional[Dict[str, Any]] = None) -> List[Dict[str, str]]:
    """OpenAI-style messages: one system prompt and one user turn."""
    return [
        {"role": "system", "content": build_system_prompt(context, attachment_analysis)},
        {"role": "user", "content": message},
    ]
