from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Index

from models.base_model import BaseModel, Base


class Category(BaseModel, Base):
    __tablename__ = "categories"

    name = Column(String(64), nullable=False)
    description = Column(String(255), nullable=True)
    color = Column(String(7), nullable=True)  # "#RRGGBB"
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="categories")
    expenses = relationship("Expense", back_populates="category", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_categories_user_name"),
        Index("ix_categories_user_id", "user_id"),
    )
