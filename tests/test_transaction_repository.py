from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from components.budget.repository import BudgetRepository
from components.category.models import RolloverStrategy
from components.category.repository import CategoryRepository
from components.category.schemas import CategoryCreate
from components.core.exceptions import InvalidReferenceError, NotFoundError, StorageFailure
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionUpdate
from components.user.repository import UserRepository
from components.user.schemas import UserCreate


def D(value):
    return Decimal(str(value))


async def figures_for(session, user_id, month, category_id):
    budgets = await BudgetRepository(session).get_category_availability(user_id, month)
    return next(b for b in budgets if b.id == category_id)


@pytest.fixture
async def envelopes(session, user, make_category):
    groceries = await make_category("Groceries", RolloverStrategy.ROLLOVER)
    dining = await make_category("Dining", RolloverStrategy.ROLLOVER)
    budget = BudgetRepository(session)
    await budget.set_assigned(user.id, groceries.id, "2026-01", D(100))
    await budget.set_assigned(user.id, dining.id, "2026-01", D(100))
    return groceries, dining


async def test_recategorizing_moves_activity_and_carryover(session, user, envelopes, make_transaction):
    groceries, dining = envelopes
    txn = await make_transaction(date(2026, 1, 10), -30, groceries.id)

    await TransactionRepository(session).update(user.id, txn.id, TransactionUpdate(category_id=dining.id))

    groceries_jan = await figures_for(session, user.id, "2026-01", groceries.id)
    dining_jan = await figures_for(session, user.id, "2026-01", dining.id)
    groceries_feb = await figures_for(session, user.id, "2026-02", groceries.id)
    dining_feb = await figures_for(session, user.id, "2026-02", dining.id)
    assert groceries_jan.activity == D(0)
    assert dining_jan.activity == D(-30)
    assert groceries_feb.carryover == D(100)
    assert dining_feb.carryover == D(70)


async def test_explicit_null_uncategorizes_and_keeps_other_fields(session, user, envelopes, make_transaction):
    groceries, _ = envelopes
    txn = await make_transaction(date(2026, 1, 10), -30, groceries.id)

    updated = await TransactionRepository(session).update(
        user.id, txn.id, TransactionUpdate(category_id=None)
    )

    assert updated.category_id is None
    assert updated.amount == D(-30)
    assert updated.date == "2026-01-10"
    groceries_jan = await figures_for(session, user.id, "2026-01", groceries.id)
    assert groceries_jan.activity == D(0)
    assert groceries_jan.available == D(100)


async def test_moving_a_transaction_to_another_month(session, user, envelopes, make_transaction):
    groceries, _ = envelopes
    txn = await make_transaction(date(2026, 1, 10), -30, groceries.id)

    await TransactionRepository(session).update(user.id, txn.id, TransactionUpdate(date=date(2026, 2, 2)))

    february = await figures_for(session, user.id, "2026-02", groceries.id)
    assert february.carryover == D(100)
    assert february.activity == D(-30)
    assert february.available == D(70)


async def test_delete_restores_carryover(session, user, envelopes, make_transaction):
    groceries, _ = envelopes
    txn = await make_transaction(date(2026, 1, 10), -30, groceries.id)
    repo = TransactionRepository(session)
    before = await figures_for(session, user.id, "2026-02", groceries.id)

    await repo.delete(user.id, txn.id)

    after = await figures_for(session, user.id, "2026-02", groceries.id)
    assert before.carryover == D(70)
    assert after.carryover == D(100)
    with pytest.raises(NotFoundError):
        await repo.get(user.id, txn.id)


async def test_list_filters_by_date_range_and_category(session, user, envelopes, make_transaction):
    groceries, dining = envelopes
    await make_transaction(date(2026, 1, 5), -10, groceries.id)
    middle = await make_transaction(date(2026, 1, 20), -20, dining.id)
    late = await make_transaction(date(2026, 2, 3), -30, groceries.id)
    await make_transaction(date(2026, 3, 1), -40, groceries.id)
    repo = TransactionRepository(session)

    in_range, in_range_total = await repo.get_all(
        user.id, date_from=date(2026, 1, 10), date_to=date(2026, 2, 28)
    )
    groceries_only, groceries_total = await repo.get_all(user.id, category_id=groceries.id)

    assert [t.id for t in in_range] == [late.id, middle.id]
    assert in_range_total == 2
    assert groceries_total == 3
    assert all(t.category_id == groceries.id for t in groceries_only)


async def test_list_pages_newest_first(session, user, make_transaction):
    for day in (1, 2, 3, 4, 5):
        await make_transaction(date(2026, 1, day), -day)
    repo = TransactionRepository(session)

    first, total = await repo.get_all(user.id, limit=2)
    third, _ = await repo.get_all(user.id, limit=2, offset=4)

    assert total == 5
    assert [t.date for t in first] == ["2026-01-05", "2026-01-04"]
    assert [t.date for t in third] == ["2026-01-01"]


async def test_update_rejects_foreign_category(session, user, make_transaction):
    other = await UserRepository(session).create(UserCreate(login="mallory", password="secret123"))
    foreign = await CategoryRepository(session).create_category(other.id, CategoryCreate(name="Theirs"))
    txn = await make_transaction(date(2026, 1, 10), -30)

    with pytest.raises(InvalidReferenceError) as excinfo:
        await TransactionRepository(session).update(user.id, txn.id, TransactionUpdate(category_id=foreign.id))

    assert excinfo.value.field == "category_id"


async def test_storage_errors_are_wrapped(session, user):
    await session.execute(text("DROP TABLE transactions"))

    with pytest.raises(StorageFailure) as excinfo:
        await TransactionRepository(session).get_all(user.id)

    assert excinfo.value.operation == "list_transactions"
    assert isinstance(excinfo.value.__cause__, OperationalError)
