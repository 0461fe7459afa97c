from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import StringConstraints, model_validator
from typing_extensions import Annotated

from budget_api.schemas.common import Amount, CamelModel, PartialUpdate

Period = Literal["weekly", "monthly", "yearly"]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class BudgetCreate(CamelModel):
    category_id: Optional[str] = None
    name: Name
    amount: Amount
    period: Period
    start_date: datetime
    end_date: Optional[datetime] = None
    rollover: bool = False

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date is not None and self.end_date.date() < self.start_date.date():
            raise ValueError("endDate must not be before startDate")
        return self


class BudgetUpdate(PartialUpdate):
    not_nullable = ("name", "amount", "period", "start_date", "rollover")

    category_id: Optional[str] = None
    name: Optional[Name] = None
    amount: Optional[Amount] = None
    period: Optional[Period] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    rollover: Optional[bool] = None


class BudgetOut(CamelModel):
    id: str
    user_id: str
    category_id: Optional[str] = None
    name: str
    amount: Decimal
    period: str
    start_date: datetime
    end_date: Optional[datetime] = None
    rollover: bool
    created_at: datetime
    updated_at: datetime

    # Derived for the current period
    spent: Decimal
    available: Decimal
    remaining: Decimal
    percent_used: float
    period_start: date
    period_end: date
