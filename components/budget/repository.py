"""Repository for budget operations: envelope availability, summary and assignment."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget import availability, carryover
from components.budget.models import MonthlyAllocation
from components.budget.months import month_bounds, month_start, validate_month
from components.budget.timeline import (
    ActivityRecord,
    AllocationRecord,
    MonthEntry,
    ZERO,
    build_timeline,
)
from components.budget import schemas
from components.category.models import Category, RolloverStrategy
from components.category.repository import CategoryRepository
from components.core.database import storage_errors
from components.core.exceptions import UnsupportedBackendError
from components.core.log_config import get_logger
from components.transaction.models import Transaction

logger = get_logger(__name__)

_CONFLICT_COLUMNS = ["user_id", "category_id", "month"]
CENT = Decimal("0.01")


def _to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class BudgetRepository:
    """Repository for budget operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.categories = CategoryRepository(session)

    # Record store reads

    async def list_categories(self, user_id: int) -> List[Category]:
        """Snapshot of the user's categories and their rollover configuration."""
        return await self.categories.list_categories(user_id)

    async def list_allocations(self, user_id: int, before_month: str) -> List[AllocationRecord]:
        """Allocations for every month strictly before ``before_month``."""
        with storage_errors("list_allocations"):
            result = await self.session.execute(
                select(MonthlyAllocation.category_id, MonthlyAllocation.month, MonthlyAllocation.assigned)
                .where(
                    MonthlyAllocation.user_id == user_id,
                    MonthlyAllocation.month < before_month,
                )
            )
            rows = result.all()
        return [AllocationRecord(row.category_id, row.month, _to_decimal(row.assigned)) for row in rows]

    async def list_categorized_transactions(self, user_id: int, before_date: str) -> List[ActivityRecord]:
        """Categorized transactions dated strictly before ``before_date``, transfers included."""
        with storage_errors("list_categorized_transactions"):
            result = await self.session.execute(
                select(Transaction.category_id, Transaction.date, Transaction.amount)
                .where(
                    Transaction.user_id == user_id,
                    Transaction.date < before_date,
                    Transaction.category_id.is_not(None),
                )
            )
            rows = result.all()
        return [ActivityRecord(row.category_id, row.date, _to_decimal(row.amount)) for row in rows]

    async def get_month_entries(self, user_id: int, month: str) -> Dict[int, MonthEntry]:
        """Assigned and activity per category for ``month`` itself."""
        start, end = month_bounds(month)
        with storage_errors("get_month_entries"):
            allocations = await self.session.execute(
                select(MonthlyAllocation.category_id, MonthlyAllocation.month, MonthlyAllocation.assigned)
                .where(MonthlyAllocation.user_id == user_id, MonthlyAllocation.month == month)
            )
            activity = await self.session.execute(
                select(Transaction.category_id, Transaction.date, Transaction.amount)
                .where(
                    Transaction.user_id == user_id,
                    Transaction.date >= start,
                    Transaction.date <= end,
                    Transaction.category_id.is_not(None),
                )
            )
            allocation_rows = allocations.all()
            activity_rows = activity.all()
        timeline = build_timeline(
            (AllocationRecord(r.category_id, r.month, _to_decimal(r.assigned)) for r in allocation_rows),
            (ActivityRecord(r.category_id, r.date, _to_decimal(r.amount)) for r in activity_rows),
        )
        return timeline.get(month, {})

    # Engine

    async def get_carryover(
        self,
        user_id: int,
        month: str,
        categories: Optional[Sequence[Category]] = None,
    ) -> carryover.CarryoverMap:
        """Carry-forward entering ``month``, recomputed from the full prior history."""
        validate_month(month)
        if categories is None:
            categories = await self.list_categories(user_id)
        policies = carryover.policy_index(carryover.CategoryPolicy.from_category(c) for c in categories)
        allocations = await self.list_allocations(user_id, month)
        transactions = await self.list_categorized_transactions(user_id, month_start(month))
        timeline = build_timeline(allocations, transactions, before_month=month)
        return carryover.propagate(policies, timeline)

    async def get_category_availability(self, user_id: int, month: str) -> List[schemas.CategoryBudget]:
        """Per-category assigned, activity, carryover, available and goal progress."""
        validate_month(month)
        categories = await self.list_categories(user_id)
        carryover_in = await self.get_carryover(user_id, month, categories)
        entries = await self.get_month_entries(user_id, month)

        budgets = []
        for category in categories:
            figures = availability.category_availability(
                category.id, carryover_in, entries, _to_decimal(category.goal_amount) or None
            )
            budgets.append(schemas.CategoryBudget(
                id=category.id,
                name=category.name,
                group_id=category.group_id,
                sort_order=category.sort_order,
                rollover_strategy=RolloverStrategy(category.rollover_strategy),
                sweep_target_id=category.sweep_target_id,
                goal_amount=category.goal_amount,
                carryover=figures.carryover,
                assigned=figures.assigned,
                activity=figures.activity,
                available=figures.available,
                goal_progress=figures.goal_progress,
            ))
        return budgets

    async def get_month_budget(self, user_id: int, month: str) -> schemas.MonthBudget:
        """Category availability arranged by category group."""
        budgets = await self.get_category_availability(user_id, month)
        groups = await self.categories.list_groups(user_id)

        by_group: Dict[int, List[schemas.CategoryBudget]] = {group.id: [] for group in groups}
        ungrouped = []
        for budget in budgets:
            if budget.group_id in by_group:
                by_group[budget.group_id].append(budget)
            else:
                ungrouped.append(budget)

        return schemas.MonthBudget(
            month=month,
            groups=[
                schemas.GroupBudget(
                    id=group.id,
                    name=group.name,
                    sort_order=group.sort_order,
                    categories=by_group[group.id],
                )
                for group in groups
            ],
            ungrouped=ungrouped,
        )

    async def get_ledger_totals(self, user_id: int, month: str) -> availability.LedgerTotals:
        """Income, expense and assignment sums used by the To Be Budgeted formula."""
        start, end = month_bounds(month)
        not_transfer = Transaction.transfer_account_id.is_(None)

        async def transaction_sum(*conditions) -> Decimal:
            result = await self.session.execute(
                select(func.sum(Transaction.amount)).where(
                    Transaction.user_id == user_id, not_transfer, *conditions
                )
            )
            return _to_decimal(result.scalar())

        with storage_errors("get_ledger_totals"):
            total_income = await transaction_sum(Transaction.amount > 0, Transaction.date <= end)
            total_expense_prior = await transaction_sum(Transaction.amount < 0, Transaction.date < start)
            month_income = await transaction_sum(
                Transaction.amount > 0, Transaction.date >= start, Transaction.date <= end
            )
            month_expenses = await transaction_sum(
                Transaction.amount < 0, Transaction.date >= start, Transaction.date <= end
            )
            result = await self.session.execute(
                select(func.sum(MonthlyAllocation.assigned)).where(
                    MonthlyAllocation.user_id == user_id,
                    MonthlyAllocation.month == month,
                )
            )
            month_assigned = _to_decimal(result.scalar())

        return availability.LedgerTotals(
            total_income=total_income,
            total_expense_prior=total_expense_prior,
            month_income=month_income,
            month_expenses=month_expenses,
            month_assigned=month_assigned,
        )

    async def get_budget_summary(self, user_id: int, month: str) -> schemas.BudgetSummary:
        """To Be Budgeted and the month's reporting totals."""
        validate_month(month)
        carryover_in = await self.get_carryover(user_id, month)
        totals = await self.get_ledger_totals(user_id, month)
        summary = availability.summarize(totals, carryover_in)
        return schemas.BudgetSummary(
            month=month,
            to_be_budgeted=summary.to_be_budgeted,
            total_income=summary.total_income,
            total_assigned=summary.total_assigned,
            month_income=summary.month_income,
            month_expenses=summary.month_expenses,
            month_assigned=summary.month_assigned,
        )

    # Allocation mutator

    async def set_assigned(
        self, user_id: int, category_id: int, month: str, amount: Decimal
    ) -> schemas.Allocation:
        """
        Replace the amount assigned to a category for a month.

        Runs as one INSERT ... ON CONFLICT/ON DUPLICATE KEY statement against
        the (user, category, month) unique constraint, so concurrent writers
        cannot create duplicate rows. Negative amounts are allowed. The amount
        is rounded to cents before it is stored, and the stored value is the
        one returned.
        """
        validate_month(month)
        await self.categories.get_category(user_id, category_id)

        assigned = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
        values = {
            "user_id": user_id,
            "category_id": category_id,
            "month": month,
            "assigned": assigned,
        }
        with storage_errors("set_assigned"):
            dialect = self.session.get_bind().dialect.name
            if dialect == "mysql":
                stmt = mysql_insert(MonthlyAllocation).values(**values)
                stmt = stmt.on_duplicate_key_update(assigned=stmt.inserted.assigned)
            elif dialect in ("sqlite", "postgresql"):
                insert = sqlite_insert if dialect == "sqlite" else postgresql_insert
                stmt = insert(MonthlyAllocation).values(**values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=_CONFLICT_COLUMNS,
                    set_={"assigned": stmt.excluded.assigned},
                )
            else:
                raise UnsupportedBackendError(dialect, "allocation upsert")

            await self.session.execute(stmt)
            await self.session.commit()

        logger.info(
            "Allocation set",
            extra={"user_id": user_id, "category_id": category_id, "month": month, "assigned": str(assigned)},
        )
        return schemas.Allocation(category_id=category_id, month=month, assigned=assigned)
