"""Repository for user operations."""

from datetime import date
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.repository import CategoryRepository
from components.core.config import get_settings
from components.core.database import storage_errors
from components.core.log_config import get_logger
from components.core.security import get_password_hash, verify_password
from components.user.models import User
from components.user.schemas import UserCreate

logger = get_logger(__name__)


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user: UserCreate) -> User:
        """Create a new user, seeding the default categories when enabled."""
        db_user = User(
            login=user.login,
            password=get_password_hash(user.password),
            registration_date=date.today()
        )
        with storage_errors("create_user"):
            self.session.add(db_user)
            await self.session.commit()
            await self.session.refresh(db_user)

        if get_settings().CREATE_DEFAULT_CATEGORIES:
            await CategoryRepository(self.session).create_default_categories(db_user.id)

        logger.info("User registered", extra={"user_id": db_user.id})
        return db_user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        with storage_errors("get_user"):
            result = await self.session.execute(
                select(User).where(User.id == user_id)
            )
            return result.scalar_one_or_none()

    async def get_by_login(self, login: str) -> Optional[User]:
        """Get user by login."""
        with storage_errors("get_user_by_login"):
            result = await self.session.execute(
                select(User).where(User.login == login)
            )
            return result.scalar_one_or_none()

    async def exists(self, login: str) -> bool:
        """Check if user with given login exists."""
        with storage_errors("user_exists"):
            result = await self.session.execute(
                select(User.id).where(User.login == login)
            )
            return result.scalar_one_or_none() is not None

    async def authenticate(self, login: str, password: str) -> Optional[User]:
        """Return the user if the credentials match."""
        user = await self.get_by_login(login)
        if user is None or not verify_password(password, user.password):
            return None
        return user
