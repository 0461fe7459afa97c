from decimal import Decimal
from typing import List, Optional

from budget_api.schemas.common import CamelModel
from budget_api.schemas.budget import BudgetOut


class CategorySpending(CamelModel):
    category_id: Optional[str] = None
    name: str
    color: Optional[str] = None
    amount: Decimal


class Summary(CamelModel):
    month: str
    income: Decimal
    expenses: Decimal
    balance: Decimal
    spending_by_category: List[CategorySpending]
    budgets: List[BudgetOut]


class MonthlyTotals(CamelModel):
    month: str
    income: Decimal
    expenses: Decimal
