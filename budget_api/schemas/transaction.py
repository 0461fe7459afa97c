from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import StringConstraints, model_validator
from typing_extensions import Annotated

from budget_api.schemas.common import Amount, CamelModel, Kind, PartialUpdate

Frequency = Literal["daily", "weekly", "monthly", "yearly"]
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class TransactionCreate(CamelModel):
    category_id: Optional[str] = None
    amount: Amount
    type: Kind
    description: Description
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    date: datetime
    is_recurring: bool = False
    recurring_frequency: Optional[Frequency] = None
    recurring_end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_recurrence(self):
        if self.is_recurring and self.recurring_frequency is None:
            raise ValueError("recurringFrequency is required for recurring transactions")
        return self


class TransactionUpdate(PartialUpdate):
    not_nullable = ("amount", "type", "description", "date", "is_recurring")

    category_id: Optional[str] = None
    amount: Optional[Amount] = None
    type: Optional[Kind] = None
    description: Optional[Description] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    date: Optional[datetime] = None
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[Frequency] = None
    recurring_end_date: Optional[datetime] = None


class TransactionOut(CamelModel):
    id: str
    user_id: str
    category_id: Optional[str] = None
    amount: Decimal
    type: str
    description: str
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    date: datetime
    is_recurring: bool
    recurring_frequency: Optional[str] = None
    recurring_end_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
