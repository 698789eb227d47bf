"""Transaction endpoints for the API."""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import ErrorResponse
from components.transaction.repository import TransactionRepository
from components.transaction import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    responses={404: {"model": ErrorResponse, "description": "Not found"}},
)


@router.get("/", response_model=schemas.TransactionPage)
async def read_transactions(
    account_id: Optional[int] = Query(None, description="Only transactions of this account"),
    category_id: Optional[int] = Query(None, description="Only transactions of this category"),
    date_from: Optional[date] = Query(None, alias="from", description="Earliest date, inclusive"),
    date_to: Optional[date] = Query(None, alias="to", description="Latest date, inclusive"),
    limit: int = Query(50, ge=1, le=500, description="Number of records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get transactions, newest first, with optional filtering."""
    repo = TransactionRepository(db)
    transactions, total = await repo.get_all(
        current_user.id,
        account_id=account_id,
        category_id=category_id,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )
    return schemas.TransactionPage(
        data=[schemas.Transaction.model_validate(txn) for txn in transactions],
        total=total,
    )


@router.post("/", response_model=schemas.Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    txn: schemas.TransactionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a transaction.

    When transfer_account_id is set, the mirrored transaction is created on the
    other account. Transfers are left out of income and expense totals.
    """
    return await TransactionRepository(db).create(current_user.id, txn)


@router.get("/{transaction_id}", response_model=schemas.Transaction)
async def read_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific transaction."""
    return await TransactionRepository(db).get(current_user.id, transaction_id)


@router.patch("/{transaction_id}", response_model=schemas.Transaction)
async def update_transaction(
    transaction_id: int,
    txn: schemas.TransactionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a transaction."""
    return await TransactionRepository(db).update(current_user.id, transaction_id, txn)


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a transaction."""
    await TransactionRepository(db).delete(current_user.id, transaction_id)
    return {"message": "Transaction deleted successfully"}
