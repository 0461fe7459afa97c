from datetime import datetime
from typing import Optional

from budget_api.schemas.common import CamelModel


class AdminFlag(CamelModel):
    is_admin: bool


class DisabledFlag(CamelModel):
    is_disabled: bool


class ResetLinkOut(CamelModel):
    link: str
    email: str


class AdminLogOut(CamelModel):
    id: str
    admin_id: str
    action: str
    target_user_id: Optional[str] = None
    target_user_email: Optional[str] = None
    details: Optional[str] = None
    created_at: datetime


class SystemStats(CamelModel):
    total_users: int
    active_users: int
    total_transactions: int
    total_budgets: int
