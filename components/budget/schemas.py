"""Pydantic schemas for budget data validation."""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from components.category.models import RolloverStrategy


class AssignRequest(BaseModel):
    """Schema for assigning money to a category for a month."""
    assigned: Decimal = Field(..., max_digits=12, decimal_places=2)


class Allocation(BaseModel):
    """Schema for the stored allocation after an upsert."""
    category_id: int
    month: str
    assigned: Decimal


class CategoryBudget(BaseModel):
    """Schema for one category's figures in a month."""
    id: int
    name: str
    group_id: Optional[int] = None
    sort_order: int
    rollover_strategy: RolloverStrategy
    sweep_target_id: Optional[int] = None
    goal_amount: Optional[Decimal] = None
    carryover: Decimal
    assigned: Decimal
    activity: Decimal
    available: Decimal
    goal_progress: Optional[float] = None


class GroupBudget(BaseModel):
    """Schema for a category group with its categories' figures."""
    id: int
    name: str
    sort_order: int
    categories: List[CategoryBudget]


class MonthBudget(BaseModel):
    """Schema for a month's budget grouped for display."""
    month: str
    groups: List[GroupBudget]
    ungrouped: List[CategoryBudget]


class BudgetSummary(BaseModel):
    """Schema for the month summary."""
    month: str
    to_be_budgeted: Decimal
    total_income: Decimal
    total_assigned: Decimal
    month_income: Decimal
    month_expenses: Decimal
    month_assigned: Decimal
