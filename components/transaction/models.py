"""Transaction model for the database."""

from sqlalchemy import Boolean, Column, Integer, String, ForeignKey, Numeric

from components.core.database import Base


class Transaction(Base):
    """Dated, signed movement of money on an account."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    # ISO YYYY-MM-DD; kept as a string so month ranges compare lexically
    date = Column(String(10), nullable=False, index=True)
    payee = Column(String(255), nullable=True)
    memo = Column(String(255), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    transfer_account_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    cleared = Column(Boolean, nullable=False, default=False)
