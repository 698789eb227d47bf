"""Monthly allocation model for the database."""

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, UniqueConstraint

from components.core.database import Base


class MonthlyAllocation(Base):
    """Amount assigned to a category for one month."""
    __tablename__ = "budget_allocations"
    __table_args__ = (
        UniqueConstraint("user_id", "category_id", "month", name="uq_allocation_user_category_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    month = Column(String(7), nullable=False)  # YYYY-MM
    assigned = Column(Numeric(12, 2), nullable=False, default=0)
