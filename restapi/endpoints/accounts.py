"""Account endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.account import schemas
from components.core.init_db import get_db
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=List[schemas.Account])
async def read_accounts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all accounts."""
    return await AccountRepository(db).get_all(current_user.id)


@router.post("/", response_model=schemas.Account, status_code=status.HTTP_201_CREATED)
async def create_account(
    account: schemas.AccountCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create an account."""
    return await AccountRepository(db).create(current_user.id, account)


@router.get("/{account_id}", response_model=schemas.Account)
async def read_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific account."""
    return await AccountRepository(db).get(current_user.id, account_id)
