"""Category and category group endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.repository import CategoryRepository
from components.category import schemas
from components.core.init_db import get_db
from components.core.schemas import ErrorResponse
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={
        404: {"model": ErrorResponse, "description": "Not found"},
        422: {"model": ErrorResponse, "description": "Invalid reference"},
    },
)


@router.get("/groups", response_model=List[schemas.CategoryGroup])
async def read_groups(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all category groups in display order."""
    return await CategoryRepository(db).list_groups(current_user.id)


@router.post("/groups", response_model=schemas.CategoryGroup, status_code=status.HTTP_201_CREATED)
async def create_group(
    group: schemas.CategoryGroupCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a category group."""
    return await CategoryRepository(db).create_group(current_user.id, group)


@router.put("/groups/{group_id}", response_model=schemas.CategoryGroup)
async def update_group(
    group_id: int,
    group: schemas.CategoryGroupUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rename or reorder a category group."""
    return await CategoryRepository(db).update_group(current_user.id, group_id, group)


@router.delete("/groups/{group_id}")
async def delete_group(
    group_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a category group. Its categories are kept without a group."""
    await CategoryRepository(db).delete_group(current_user.id, group_id)
    return {"message": "Category group deleted successfully"}


@router.get("/", response_model=List[schemas.Category])
async def read_categories(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all categories in display order."""
    return await CategoryRepository(db).list_categories(current_user.id)


@router.post("/", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    category: schemas.CategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a category.

    The sweep target, when given, must be another category of the same user
    and must not lead back to this category through other sweep targets.
    """
    return await CategoryRepository(db).create_category(current_user.id, category)


@router.get("/{category_id}", response_model=schemas.Category)
async def read_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific category."""
    return await CategoryRepository(db).get_category(current_user.id, category_id)


@router.patch("/{category_id}", response_model=schemas.Category)
async def update_category(
    category_id: int,
    category: schemas.CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a category's name, group, goal or rollover configuration."""
    return await CategoryRepository(db).update_category(current_user.id, category_id, category)


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a category, its allocations and its sweep links."""
    await CategoryRepository(db).delete_category(current_user.id, category_id)
    return {"message": "Category deleted successfully"}
