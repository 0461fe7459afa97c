from sqlalchemy import Column, String, Boolean, DateTime, Numeric, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from budget_api.db.session import Base
from budget_api.models.common import generate_id


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String, primary_key=True, index=True, default=generate_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    # Always non-negative, direction is carried by type
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String, nullable=False)  # 'income' or 'expense'
    description = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)

    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_frequency = Column(String, nullable=True)  # 'daily', 'weekly', 'monthly', 'yearly'
    recurring_end_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship("User", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")
