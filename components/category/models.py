"""Category and category group models for the database."""

import enum

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class RolloverStrategy(str, enum.Enum):
    """What happens to a category's unspent positive balance at month end."""
    NONE = "none"
    ROLLOVER = "rollover"
    SWEEP = "sweep"


class CategoryGroup(Base):
    """Display/ordering container for categories."""
    __tablename__ = "category_groups"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    # Relationships
    user = relationship("User", back_populates="category_groups")
    categories = relationship("Category", back_populates="group", passive_deletes=True)


class Category(Base):
    """Budget envelope with its rollover configuration."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("category_groups.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(100), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    rollover_strategy = Column(String(50), nullable=False, default=RolloverStrategy.NONE.value)
    sweep_target_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    goal_amount = Column(Numeric(12, 2), nullable=True)

    # Relationships
    user = relationship("User", back_populates="categories")
    group = relationship("CategoryGroup", back_populates="categories")
