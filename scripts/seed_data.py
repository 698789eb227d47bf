"""Script to seed demo data into the database."""

import asyncio
from datetime import date
from decimal import Decimal

from components.account import schemas as account_schemas
from components.account.repository import AccountRepository
from components.budget.repository import BudgetRepository
from components.category import schemas as category_schemas
from components.category.models import RolloverStrategy
from components.category.repository import CategoryRepository
from components.core.init_db import db_manager, get_db
from components.transaction import schemas as transaction_schemas
from components.transaction.repository import TransactionRepository
from components.user.repository import UserRepository
from components.user.schemas import UserCreate

MONTHS = ["2026-01", "2026-02", "2026-03"]


async def seed_data():
    """Seed a demo user whose categories use every rollover strategy."""
    await db_manager.create_tables()

    async for db in get_db():
        users = UserRepository(db)
        if await users.exists("demo"):
            print("Demo user already exists, nothing to do")
            return
        user = await users.create(UserCreate(login="demo", password="password123"))

        accounts = AccountRepository(db)
        checking = await accounts.create(user.id, account_schemas.AccountCreate(name="Checking", type="checking"))
        savings = await accounts.create(user.id, account_schemas.AccountCreate(name="Savings", type="savings"))

        categories = CategoryRepository(db)
        group = await categories.create_group(
            user.id, category_schemas.CategoryGroupCreate(name="Demo Envelopes", sort_order=0)
        )
        vacation = await categories.create_category(user.id, category_schemas.CategoryCreate(
            name="Vacation", group_id=group.id, rollover_strategy=RolloverStrategy.ROLLOVER,
            goal_amount=Decimal("1200.00"),
        ))
        groceries = await categories.create_category(user.id, category_schemas.CategoryCreate(
            name="Weekly Groceries", group_id=group.id, rollover_strategy=RolloverStrategy.SWEEP,
            sweep_target_id=vacation.id,
        ))
        dining = await categories.create_category(user.id, category_schemas.CategoryCreate(
            name="Dining", group_id=group.id, rollover_strategy=RolloverStrategy.NONE,
        ))
        print(f"Created user {user.login} with categories {vacation.id}, {groceries.id}, {dining.id}")

        transactions = TransactionRepository(db)
        budget = BudgetRepository(db)
        for index, month in enumerate(MONTHS):
            year, month_number = map(int, month.split("-"))
            await transactions.create(user.id, transaction_schemas.TransactionCreate(
                account_id=checking.id, date=date(year, month_number, 1),
                payee="Employer", amount=Decimal("3000.00"), cleared=True,
            ))
            await transactions.create(user.id, transaction_schemas.TransactionCreate(
                account_id=checking.id, category_id=groceries.id, date=date(year, month_number, 10),
                payee="Market", amount=Decimal("-320.00") - index * 20,
            ))
            await transactions.create(user.id, transaction_schemas.TransactionCreate(
                account_id=checking.id, category_id=dining.id, date=date(year, month_number, 15),
                payee="Bistro", amount=Decimal("-140.00"),
            ))
            await transactions.create(user.id, transaction_schemas.TransactionCreate(
                account_id=checking.id, transfer_account_id=savings.id, date=date(year, month_number, 28),
                payee="Transfer", amount=Decimal("-500.00"),
            ))
            await budget.set_assigned(user.id, vacation.id, month, Decimal("200.00"))
            await budget.set_assigned(user.id, groceries.id, month, Decimal("400.00"))
            await budget.set_assigned(user.id, dining.id, month, Decimal("120.00"))
            print(f"Seeded {month}")

        summary = await budget.get_budget_summary(user.id, MONTHS[-1])
        print(f"To Be Budgeted for {MONTHS[-1]}: {summary.to_be_budgeted}")


if __name__ == "__main__":
    asyncio.run(seed_data())
