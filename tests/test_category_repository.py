from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError

from components.budget.models import MonthlyAllocation
from components.budget.repository import BudgetRepository
from components.category.models import RolloverStrategy
from components.category.repository import DEFAULT_GROUPS, CategoryRepository
from components.category.schemas import CategoryCreate, CategoryGroupCreate, CategoryUpdate
from components.core.exceptions import InvalidReferenceError, NotFoundError, StorageFailure
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionCreate
from components.user.repository import UserRepository
from components.user.schemas import UserCreate


async def test_sweep_target_must_not_be_itself(session, user, make_category):
    category = await make_category("Groceries", RolloverStrategy.SWEEP)

    with pytest.raises(InvalidReferenceError) as excinfo:
        await CategoryRepository(session).update_category(
            user.id, category.id, CategoryUpdate(sweep_target_id=category.id)
        )

    assert excinfo.value.field == "sweep_target_id"


async def test_sweep_target_must_belong_to_user(session, user, make_category):
    other = await UserRepository(session).create(UserCreate(login="carol", password="secret123"))
    foreign = await make_category("Theirs", user_id=other.id)

    with pytest.raises(InvalidReferenceError):
        await make_category("Mine", RolloverStrategy.SWEEP, sweep_target_id=foreign.id)


async def test_sweep_cycle_is_rejected(session, user, make_category):
    repo = CategoryRepository(session)
    first = await make_category("First", RolloverStrategy.SWEEP)
    second = await make_category("Second", RolloverStrategy.SWEEP, sweep_target_id=first.id)
    third = await make_category("Third", RolloverStrategy.SWEEP, sweep_target_id=second.id)

    with pytest.raises(InvalidReferenceError):
        await repo.update_category(user.id, first.id, CategoryUpdate(sweep_target_id=third.id))


async def test_update_keeps_untouched_fields(session, user, make_category):
    target = await make_category("Vacation", RolloverStrategy.ROLLOVER)
    category = await make_category("Groceries", RolloverStrategy.SWEEP, sweep_target_id=target.id)

    updated = await CategoryRepository(session).update_category(
        user.id, category.id, CategoryUpdate(name="Food", goal_amount=Decimal("300"))
    )

    assert updated.name == "Food"
    assert updated.rollover_strategy == "sweep"
    assert updated.sweep_target_id == target.id


async def test_explicit_null_clears_sweep_target(session, user, make_category):
    target = await make_category("Vacation")
    category = await make_category("Groceries", RolloverStrategy.SWEEP, sweep_target_id=target.id)

    updated = await CategoryRepository(session).update_category(
        user.id, category.id, CategoryUpdate(sweep_target_id=None)
    )

    assert updated.sweep_target_id is None


async def test_group_must_belong_to_user(session, user):
    other = await UserRepository(session).create(UserCreate(login="carol", password="secret123"))
    repo = CategoryRepository(session)
    foreign_group = await repo.create_group(other.id, CategoryGroupCreate(name="Theirs"))

    with pytest.raises(InvalidReferenceError):
        await repo.create_category(user.id, CategoryCreate(name="Mine", group_id=foreign_group.id))


async def test_delete_category_unlinks_sweeps_and_allocations(session, user, account, make_category):
    repo = CategoryRepository(session)
    target = await make_category("Vacation", RolloverStrategy.ROLLOVER)
    source = await make_category("Groceries", RolloverStrategy.SWEEP, sweep_target_id=target.id)
    await BudgetRepository(session).set_assigned(user.id, target.id, "2026-01", Decimal("10"))
    txn = await TransactionRepository(session).create(user.id, _spend(account.id, target.id))

    await repo.delete_category(user.id, target.id)

    refreshed = await repo.get_category(user.id, source.id)
    await session.refresh(txn)
    allocations = await session.execute(
        select(MonthlyAllocation).where(MonthlyAllocation.category_id == target.id)
    )
    assert refreshed.sweep_target_id is None
    assert txn.category_id is None
    assert allocations.scalars().all() == []
    with pytest.raises(NotFoundError):
        await repo.get_category(user.id, target.id)


async def test_delete_group_keeps_categories(session, user):
    repo = CategoryRepository(session)
    group = await repo.create_group(user.id, CategoryGroupCreate(name="Bills"))
    category = await repo.create_category(user.id, CategoryCreate(name="Power", group_id=group.id))

    await repo.delete_group(user.id, group.id)

    refreshed = await repo.get_category(user.id, category.id)
    await session.refresh(refreshed)
    assert refreshed.group_id is None
    assert await repo.list_groups(user.id) == []


async def test_default_categories(session, user):
    repo = CategoryRepository(session)

    created = await repo.create_default_categories(user.id)
    again = await repo.create_default_categories(user.id)

    groups = await repo.list_groups(user.id)
    categories = await repo.list_categories(user.id)
    assert len(created) == len(DEFAULT_GROUPS)
    assert again == []
    assert [g.name for g in groups] == [name for name, _ in DEFAULT_GROUPS]
    assert len(categories) == sum(len(names) for _, names in DEFAULT_GROUPS)
    assert all(c.rollover_strategy == "none" for c in categories)


def _spend(account_id, category_id):
    return TransactionCreate(
        account_id=account_id,
        category_id=category_id,
        date=date(2026, 1, 3),
        amount=Decimal("-5"),
    )


async def test_storage_errors_are_wrapped(session, user):
    await session.execute(text("DROP TABLE categories"))

    with pytest.raises(StorageFailure) as excinfo:
        await CategoryRepository(session).create_category(user.id, CategoryCreate(name="Groceries"))

    assert excinfo.value.operation == "create_category"
    assert isinstance(excinfo.value.__cause__, OperationalError)
