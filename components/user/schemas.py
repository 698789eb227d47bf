"""Pydantic schemas for user data validation."""

from datetime import date
from pydantic import BaseModel, Field


class UserBase(BaseModel):
    """Base user schema."""
    login: str = Field(..., min_length=3, max_length=50)


class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=6)


class User(UserBase):
    """Schema for user response."""
    id: int
    registration_date: date

    class Config:
        from_attributes = True


class UserWithToken(User):
    """Schema for user response with access token."""
    access_token: str
    token_type: str = "bearer"
