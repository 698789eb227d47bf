"""Repository for account operations."""

from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account import schemas
from components.core.database import storage_errors
from components.core.exceptions import NotFoundError


class AccountRepository:
    """Repository for account operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user_id: int, account: schemas.AccountCreate) -> Account:
        """Create a new account."""
        db_account = Account(user_id=user_id, name=account.name, type=account.type)
        with storage_errors("create_account"):
            self.session.add(db_account)
            await self.session.commit()
            await self.session.refresh(db_account)
        return db_account

    async def get_all(self, user_id: int) -> List[Account]:
        """Get all accounts of a user."""
        with storage_errors("list_accounts"):
            result = await self.session.execute(
                select(Account).where(Account.user_id == user_id).order_by(Account.id)
            )
            return list(result.scalars().all())

    async def get(self, user_id: int, account_id: int) -> Account:
        """Get an account owned by the user or raise NotFoundError."""
        with storage_errors("get_account"):
            result = await self.session.execute(
                select(Account).where(Account.id == account_id, Account.user_id == user_id)
            )
            account = result.scalar_one_or_none()
        if account is None:
            raise NotFoundError("Account", account_id)
        return account
