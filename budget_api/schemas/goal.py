from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import StringConstraints, field_validator
from typing_extensions import Annotated

from budget_api.schemas.common import Amount, CamelModel, HexColor, IconName, PartialUpdate

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class GoalCreate(CamelModel):
    name: Name
    target_amount: Amount
    current_amount: Optional[Amount] = None
    deadline: Optional[datetime] = None
    icon: Optional[IconName] = None
    color: Optional[HexColor] = None


class GoalUpdate(PartialUpdate):
    not_nullable = ("name", "target_amount", "current_amount")

    name: Optional[Name] = None
    target_amount: Optional[Amount] = None
    current_amount: Optional[Amount] = None
    deadline: Optional[datetime] = None
    icon: Optional[IconName] = None
    color: Optional[HexColor] = None


class AddFunds(CamelModel):
    amount: Amount

    @field_validator("amount")
    @classmethod
    def _positive(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("amount must be greater than zero")
        return value


class GoalOut(CamelModel):
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[datetime] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_completed: bool
    progress: float
    created_at: datetime
    updated_at: datetime
