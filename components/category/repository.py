"""Repository for category and category group operations."""

from typing import Dict, List, Optional
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.models import MonthlyAllocation
from components.category.models import Category, CategoryGroup, RolloverStrategy
from components.category import schemas
from components.core.database import storage_errors
from components.core.exceptions import InvalidReferenceError, NotFoundError
from components.core.log_config import get_logger
from components.transaction.models import Transaction

logger = get_logger(__name__)

DEFAULT_GROUPS = [
    ("Housing", ["Rent/Mortgage", "Home Maintenance", "Property Taxes"]),
    ("Utilities", ["Electricity", "Water", "Internet", "Trash", "Cell Phone"]),
    ("Food", ["Groceries", "Dining Out"]),
    ("Transportation", ["Auto Loan", "Gas", "Auto Maintenance", "Auto Insurance", "Public Transit"]),
    ("Personal", ["Clothing", "Entertainment", "Subscriptions", "Hobbies"]),
    ("Health & Fitness", ["Medical/Dental", "Gym/Sports", "Pharmacy"]),
    ("Savings & Debt", ["Emergency Fund", "Retirement", "Extra Debt Payment"]),
]


class CategoryRepository:
    """Repository for category and category group operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    # Groups

    async def list_groups(self, user_id: int) -> List[CategoryGroup]:
        """Get all category groups of a user in display order."""
        with storage_errors("list_groups"):
            result = await self.session.execute(
                select(CategoryGroup)
                .where(CategoryGroup.user_id == user_id)
                .order_by(CategoryGroup.sort_order, CategoryGroup.id)
            )
            return list(result.scalars().all())

    async def get_group(self, user_id: int, group_id: int) -> CategoryGroup:
        """Get a group owned by the user or raise NotFoundError."""
        with storage_errors("get_group"):
            result = await self.session.execute(
                select(CategoryGroup).where(
                    CategoryGroup.id == group_id,
                    CategoryGroup.user_id == user_id,
                )
            )
            group = result.scalar_one_or_none()
        if group is None:
            raise NotFoundError("Category group", group_id)
        return group

    async def create_group(self, user_id: int, group: schemas.CategoryGroupCreate) -> CategoryGroup:
        """Create a new category group."""
        db_group = CategoryGroup(user_id=user_id, name=group.name, sort_order=group.sort_order)
        with storage_errors("create_group"):
            self.session.add(db_group)
            await self.session.commit()
            await self.session.refresh(db_group)
        return db_group

    async def update_group(
        self, user_id: int, group_id: int, group: schemas.CategoryGroupUpdate
    ) -> CategoryGroup:
        """Update name or sort order of a group."""
        db_group = await self.get_group(user_id, group_id)
        for field, value in group.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(db_group, field, value)
        with storage_errors("update_group"):
            await self.session.commit()
            await self.session.refresh(db_group)
        return db_group

    async def delete_group(self, user_id: int, group_id: int) -> None:
        """Delete a group; its categories become ungrouped."""
        db_group = await self.get_group(user_id, group_id)
        with storage_errors("delete_group"):
            await self.session.execute(
                update(Category)
                .where(Category.group_id == group_id, Category.user_id == user_id)
                .values(group_id=None)
            )
            await self.session.delete(db_group)
            await self.session.commit()

    # Categories

    async def list_categories(self, user_id: int) -> List[Category]:
        """Get all categories of a user in display order."""
        with storage_errors("list_categories"):
            result = await self.session.execute(
                select(Category)
                .where(Category.user_id == user_id)
                .order_by(Category.sort_order, Category.id)
            )
            return list(result.scalars().all())

    async def get_category(self, user_id: int, category_id: int) -> Category:
        """Get a category owned by the user or raise NotFoundError."""
        with storage_errors("get_category"):
            result = await self.session.execute(
                select(Category).where(
                    Category.id == category_id,
                    Category.user_id == user_id,
                )
            )
            category = result.scalar_one_or_none()
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    async def create_category(self, user_id: int, category: schemas.CategoryCreate) -> Category:
        """Create a new category after checking its references."""
        await self._check_group(user_id, category.group_id)
        await self._check_sweep_target(user_id, None, category.sweep_target_id)

        db_category = Category(
            user_id=user_id,
            group_id=category.group_id,
            name=category.name,
            sort_order=category.sort_order,
            rollover_strategy=category.rollover_strategy.value,
            sweep_target_id=category.sweep_target_id,
            goal_amount=category.goal_amount,
        )
        with storage_errors("create_category"):
            self.session.add(db_category)
            await self.session.commit()
            await self.session.refresh(db_category)
        logger.info(
            "Category created",
            extra={"user_id": user_id, "category_id": db_category.id,
                   "rollover_strategy": db_category.rollover_strategy},
        )
        return db_category

    async def update_category(
        self, user_id: int, category_id: int, category: schemas.CategoryUpdate
    ) -> Category:
        """
        Update a category.

        Only fields present in the request are touched; an explicit null
        clears ``group_id``, ``sweep_target_id`` or ``goal_amount``.
        """
        db_category = await self.get_category(user_id, category_id)
        changes = category.model_dump(exclude_unset=True)

        if "group_id" in changes:
            await self._check_group(user_id, changes["group_id"])
        if "sweep_target_id" in changes:
            await self._check_sweep_target(user_id, category_id, changes["sweep_target_id"])

        for field in ("name", "sort_order", "rollover_strategy"):
            if changes.get(field) is not None:
                value = changes[field]
                setattr(db_category, field, value.value if isinstance(value, RolloverStrategy) else value)
        for field in ("group_id", "sweep_target_id", "goal_amount"):
            if field in changes:
                setattr(db_category, field, changes[field])

        with storage_errors("update_category"):
            await self.session.commit()
            await self.session.refresh(db_category)
        logger.info(
            "Category updated",
            extra={"user_id": user_id, "category_id": category_id, "fields": sorted(changes)},
        )
        return db_category

    async def delete_category(self, user_id: int, category_id: int) -> None:
        """
        Delete a category.

        Categories sweeping into it lose their target, its allocations are
        removed and its transactions become uncategorized.
        """
        db_category = await self.get_category(user_id, category_id)
        with storage_errors("delete_category"):
            await self.session.execute(
                update(Category)
                .where(Category.user_id == user_id, Category.sweep_target_id == category_id)
                .values(sweep_target_id=None)
            )
            await self.session.execute(
                update(Transaction)
                .where(Transaction.user_id == user_id, Transaction.category_id == category_id)
                .values(category_id=None)
            )
            await self.session.execute(
                delete(MonthlyAllocation).where(
                    MonthlyAllocation.user_id == user_id,
                    MonthlyAllocation.category_id == category_id,
                )
            )
            await self.session.delete(db_category)
            await self.session.commit()
        logger.info("Category deleted", extra={"user_id": user_id, "category_id": category_id})

    async def create_default_categories(self, user_id: int) -> List[CategoryGroup]:
        """Create the default groups and categories for a user without any groups."""
        if await self.list_groups(user_id):
            return []

        groups = []
        with storage_errors("create_default_categories"):
            for group_order, (group_name, category_names) in enumerate(DEFAULT_GROUPS, start=1):
                group = CategoryGroup(user_id=user_id, name=group_name, sort_order=group_order)
                self.session.add(group)
                await self.session.flush()
                for category_order, name in enumerate(category_names, start=1):
                    self.session.add(Category(
                        user_id=user_id,
                        group_id=group.id,
                        name=name,
                        sort_order=category_order,
                        rollover_strategy=RolloverStrategy.NONE.value,
                    ))
                groups.append(group)
            await self.session.commit()
        return groups

    # Reference checks

    async def _check_group(self, user_id: int, group_id: Optional[int]) -> None:
        if group_id is None:
            return
        try:
            await self.get_group(user_id, group_id)
        except NotFoundError:
            raise InvalidReferenceError(
                f"Category group {group_id} does not belong to the user",
                field="group_id",
                value=group_id,
            ) from None

    async def _check_sweep_target(
        self, user_id: int, category_id: Optional[int], target_id: Optional[int]
    ) -> None:
        """
        A sweep target must be another category of the same user and must not
        lead back to the category through other sweep targets.
        """
        if target_id is None:
            return
        if target_id == category_id:
            raise InvalidReferenceError(
                "A category cannot sweep into itself",
                field="sweep_target_id",
                value=target_id,
            )

        with storage_errors("check_sweep_target"):
            result = await self.session.execute(
                select(Category.id, Category.sweep_target_id).where(Category.user_id == user_id)
            )
            links: Dict[int, Optional[int]] = {row.id: row.sweep_target_id for row in result.all()}
        if target_id not in links:
            raise InvalidReferenceError(
                f"Sweep target {target_id} does not belong to the user",
                field="sweep_target_id",
                value=target_id,
            )
        if category_id is None:
            return

        visited = set()
        current = target_id
        while current is not None and current not in visited:
            if current == category_id:
                raise InvalidReferenceError(
                    f"Sweep target {target_id} would create a sweep cycle",
                    field="sweep_target_id",
                    value=target_id,
                )
            visited.add(current)
            current = links.get(current)
