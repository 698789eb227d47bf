"""Budget endpoints for the API."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.months import MONTH_PATTERN
from components.budget.repository import BudgetRepository
from components.budget import schemas
from components.core.init_db import get_db
from components.core.schemas import ErrorResponse
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
    responses={404: {"model": ErrorResponse, "description": "Not found"}},
)

MonthPath = Path(..., pattern=MONTH_PATTERN, description="Budget month in YYYY-MM format")


@router.get("/summary/{month}", response_model=schemas.BudgetSummary)
async def get_budget_summary(
    month: str = MonthPath,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get the budget summary for a month.

    Returns:
    - To Be Budgeted: money not yet assigned to any category
    - Total income up to the end of the month (transfers excluded)
    - Total assigned: amounts rolled over into the month plus the month's assignments
    - Income, expenses and assignments of the month itself
    """
    repo = BudgetRepository(db)
    return await repo.get_budget_summary(current_user.id, month)


@router.get("/{month}", response_model=schemas.MonthBudget)
async def get_month_budget(
    month: str = MonthPath,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get every category's figures for a month, grouped by category group.

    For each category:
    - Carryover brought forward from prior months
    - Assigned amount and activity of the month
    - Available = carryover + assigned + activity
    - Goal progress in percent when the category has a goal
    """
    repo = BudgetRepository(db)
    return await repo.get_month_budget(current_user.id, month)


@router.put("/{month}/{category_id}", response_model=schemas.Allocation)
async def set_assigned(
    body: schemas.AssignRequest,
    category_id: int,
    month: str = MonthPath,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Assign money to a category for a month, replacing any earlier amount."""
    repo = BudgetRepository(db)
    return await repo.set_assigned(current_user.id, category_id, month, body.assigned)
