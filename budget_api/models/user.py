from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from budget_api.db.session import Base


class User(Base):
    __tablename__ = "users"

    # Identity-provider subject (uid), not generated here
    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_disabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Owned records go away with the user
    categories = relationship("Category", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    transactions = relationship("Transaction", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    budgets = relationship("Budget", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    goals = relationship("Goal", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
