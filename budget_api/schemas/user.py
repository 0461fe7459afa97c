from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, StringConstraints
from typing_extensions import Annotated

from budget_api.schemas.common import CamelModel


class UserSync(CamelModel):
    id: Annotated[str, StringConstraints(min_length=1, max_length=128)]
    email: EmailStr
    display_name: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")


class UserOut(CamelModel):
    id: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")
    is_admin: bool
    is_disabled: bool
    created_at: datetime
