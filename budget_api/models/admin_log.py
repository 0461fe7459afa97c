from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text

from budget_api.db.session import Base
from budget_api.models.common import generate_id


class AdminLog(Base):
    """Append-only audit trail of privileged actions.

    admin_id and target_user_id are plain columns, not foreign keys, so the
    history outlives the accounts it mentions.
    """
    __tablename__ = "admin_logs"

    id = Column(String, primary_key=True, index=True, default=generate_id)
    admin_id = Column(String, nullable=False, index=True)
    action = Column(String, nullable=False)  # e.g. 'made_admin', 'disabled_account', 'deleted_account'
    target_user_id = Column(String, nullable=True, index=True)
    target_user_email = Column(String, nullable=True)
    details = Column(Text, nullable=True)
    # Python-side default keeps sub-second ordering on every backend
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
