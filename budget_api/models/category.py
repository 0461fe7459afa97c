from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from budget_api.db.session import Base
from budget_api.models.common import generate_id


class Category(Base):
    __tablename__ = "categories"

    id = Column(String, primary_key=True, index=True, default=generate_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # 'income' or 'expense'
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    owner = relationship("User", back_populates="categories")
    # Deleting a category clears transaction.category_id but removes its budgets
    transactions = relationship("Transaction", back_populates="category", passive_deletes=True)
    budgets = relationship("Budget", back_populates="category", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Category name={self.name} user_id={self.user_id}>"
