"""Pydantic schemas for transactions."""

from datetime import date as date_type
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class TransactionBase(BaseModel):
    """Base transaction schema."""
    account_id: int
    category_id: Optional[int] = None
    date: date_type
    payee: Optional[str] = Field(None, max_length=255)
    memo: Optional[str] = Field(None, max_length=255)
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    cleared: bool = False


class TransactionCreate(TransactionBase):
    """Schema for transaction creation. A transfer account creates a mirrored entry."""
    transfer_account_id: Optional[int] = None


class TransactionUpdate(BaseModel):
    """Schema for partial transaction update."""
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    date: Optional[date_type] = None
    payee: Optional[str] = Field(None, max_length=255)
    memo: Optional[str] = Field(None, max_length=255)
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    cleared: Optional[bool] = None


class Transaction(TransactionBase):
    """Schema for transaction response."""
    id: int
    transfer_account_id: Optional[int] = None

    class Config:
        from_attributes = True


class TransactionPage(BaseModel):
    """Schema for a page of transactions."""
    data: List[Transaction]
    total: int
