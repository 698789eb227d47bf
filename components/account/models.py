"""Account model for the database."""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from components.core.database import Base


class Account(Base):
    """Account model representing a bank, cash or credit account."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(30), nullable=False, default="checking")

    # Relationships
    user = relationship("User", back_populates="accounts")
