from datetime import datetime
from typing import Optional

from pydantic import StringConstraints
from typing_extensions import Annotated

from budget_api.schemas.common import CamelModel, HexColor, IconName, Kind


class CategoryCreate(CamelModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    type: Kind
    icon: Optional[IconName] = None
    color: Optional[HexColor] = None


class CategoryOut(CamelModel):
    id: str
    user_id: str
    name: str
    type: str
    icon: Optional[str] = None
    color: Optional[str] = None
    is_default: bool
    created_at: datetime
