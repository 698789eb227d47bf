"""Pydantic schemas for categories and category groups."""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from components.category.models import RolloverStrategy


class CategoryGroupBase(BaseModel):
    """Base category group schema."""
    name: str = Field(..., min_length=1, max_length=100)
    sort_order: int = 0


class CategoryGroupCreate(CategoryGroupBase):
    """Schema for category group creation."""
    pass


class CategoryGroupUpdate(BaseModel):
    """Schema for partial category group update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    sort_order: Optional[int] = None


class CategoryGroup(CategoryGroupBase):
    """Schema for category group response."""
    id: int

    class Config:
        from_attributes = True


class CategoryBase(BaseModel):
    """Base category schema."""
    name: str = Field(..., min_length=1, max_length=100)
    group_id: Optional[int] = None
    sort_order: int = 0
    rollover_strategy: RolloverStrategy = RolloverStrategy.NONE
    sweep_target_id: Optional[int] = None
    goal_amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)


class CategoryCreate(CategoryBase):
    """Schema for category creation."""
    pass


class CategoryUpdate(BaseModel):
    """Schema for partial category update. Explicit nulls clear a field."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    group_id: Optional[int] = None
    sort_order: Optional[int] = None
    rollover_strategy: Optional[RolloverStrategy] = None
    sweep_target_id: Optional[int] = None
    goal_amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)


class Category(CategoryBase):
    """Schema for category response."""
    id: int

    class Config:
        from_attributes = True
