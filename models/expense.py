from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, utcnow


class Expense(BaseModel, Base):
    __tablename__ = "expenses"

    amount = Column(Numeric(12, 2), nullable=False)  # validated > 0 (in schema)
    description = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False, default=utcnow)
    payment_method = Column(String(64), nullable=False)
    attachment_url = Column(String(2048), nullable=True)

    # Category: RESTRICT deletion while expenses reference it
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    category = relationship("Category", back_populates="expenses")
    user = relationship("User", back_populates="expenses")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        Index("ix_expenses_user_date", "user_id", "date"),
    )
