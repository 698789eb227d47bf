"""Repository for transaction operations."""

from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.category.repository import CategoryRepository
from components.core.database import storage_errors
from components.core.exceptions import InvalidReferenceError, NotFoundError
from components.core.log_config import get_logger
from components.transaction.models import Transaction
from components.transaction import schemas

logger = get_logger(__name__)


class TransactionRepository:
    """Repository for transaction operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.accounts = AccountRepository(session)
        self.categories = CategoryRepository(session)

    async def create(self, user_id: int, txn: schemas.TransactionCreate) -> Transaction:
        """
        Create a transaction.

        A transfer also records the mirrored entry on the other account with
        the opposite amount and no category.
        """
        await self._check_account(user_id, txn.account_id, "account_id")
        await self._check_category(user_id, txn.category_id)
        if txn.transfer_account_id is not None:
            await self._check_account(user_id, txn.transfer_account_id, "transfer_account_id")

        db_txn = Transaction(
            user_id=user_id,
            account_id=txn.account_id,
            category_id=txn.category_id,
            date=txn.date.isoformat(),
            payee=txn.payee,
            memo=txn.memo,
            amount=txn.amount,
            transfer_account_id=txn.transfer_account_id,
            cleared=txn.cleared,
        )
        mirror = None
        if txn.transfer_account_id is not None:
            mirror = Transaction(
                user_id=user_id,
                account_id=txn.transfer_account_id,
                category_id=None,
                date=txn.date.isoformat(),
                payee="Transfer",
                memo=txn.memo,
                amount=-txn.amount,
                transfer_account_id=txn.account_id,
                cleared=txn.cleared,
            )

        with storage_errors("create_transaction"):
            self.session.add(db_txn)
            if mirror is not None:
                self.session.add(mirror)
            await self.session.commit()
            await self.session.refresh(db_txn)
        return db_txn

    async def get_all(
        self,
        user_id: int,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Transaction], int]:
        """Get a page of transactions, newest first, with the total match count."""
        conditions = [Transaction.user_id == user_id]
        if account_id is not None:
            conditions.append(Transaction.account_id == account_id)
        if category_id is not None:
            conditions.append(Transaction.category_id == category_id)
        if date_from is not None:
            conditions.append(Transaction.date >= date_from.isoformat())
        if date_to is not None:
            conditions.append(Transaction.date <= date_to.isoformat())

        with storage_errors("list_transactions"):
            total = await self.session.execute(
                select(func.count(Transaction.id)).where(*conditions)
            )
            result = await self.session.execute(
                select(Transaction)
                .where(*conditions)
                .order_by(Transaction.date.desc(), Transaction.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return list(result.scalars().all()), total.scalar() or 0

    async def get(self, user_id: int, transaction_id: int) -> Transaction:
        """Get a transaction owned by the user or raise NotFoundError."""
        with storage_errors("get_transaction"):
            result = await self.session.execute(
                select(Transaction).where(
                    Transaction.id == transaction_id,
                    Transaction.user_id == user_id,
                )
            )
            txn = result.scalar_one_or_none()
        if txn is None:
            raise NotFoundError("Transaction", transaction_id)
        return txn

    async def update(
        self, user_id: int, transaction_id: int, txn: schemas.TransactionUpdate
    ) -> Transaction:
        """Update only the fields present in the request."""
        db_txn = await self.get(user_id, transaction_id)
        changes = txn.model_dump(exclude_unset=True)

        if changes.get("account_id") is not None and changes["account_id"] != db_txn.account_id:
            await self._check_account(user_id, changes["account_id"], "account_id")
        if "category_id" in changes:
            await self._check_category(user_id, changes["category_id"])

        for field, value in changes.items():
            if field == "date" and value is not None:
                value = value.isoformat()
            if value is None and field not in ("category_id", "payee", "memo"):
                continue
            setattr(db_txn, field, value)

        with storage_errors("update_transaction"):
            await self.session.commit()
            await self.session.refresh(db_txn)
        return db_txn

    async def delete(self, user_id: int, transaction_id: int) -> None:
        """Delete a transaction."""
        db_txn = await self.get(user_id, transaction_id)
        with storage_errors("delete_transaction"):
            await self.session.delete(db_txn)
            await self.session.commit()

    async def _check_account(self, user_id: int, account_id: int, field: str) -> None:
        try:
            await self.accounts.get(user_id, account_id)
        except NotFoundError:
            raise InvalidReferenceError(
                f"Account {account_id} does not belong to the user", field=field, value=account_id
            ) from None

    async def _check_category(self, user_id: int, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        try:
            await self.categories.get_category(user_id, category_id)
        except NotFoundError:
            raise InvalidReferenceError(
                f"Category {category_id} does not belong to the user",
                field="category_id",
                value=category_id,
            ) from None
