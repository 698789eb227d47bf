"""Pydantic schemas for accounts."""

from typing import Literal
from pydantic import BaseModel, Field

AccountType = Literal["checking", "savings", "cash", "credit_card", "investment", "loan"]


class AccountBase(BaseModel):
    """Base account schema."""
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType = "checking"


class AccountCreate(AccountBase):
    """Schema for account creation."""
    pass


class Account(AccountBase):
    """Schema for account response."""
    id: int

    class Config:
        from_attributes = True
