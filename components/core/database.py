"""Core classes and mixins for DB connections"""

from contextlib import asynccontextmanager, contextmanager
from typing import Any, Dict, Optional, cast
from typing import Callable, AsyncContextManager, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from components.core import config
from components.core.exceptions import StorageFailure
from components.core.log_config import get_logger

settings = config.get_settings()
logger = get_logger(__name__)
Base = declarative_base()
SessionMaker = Callable[[], AsyncContextManager[AsyncSession]]


class DatabaseManager:
    def __init__(self, engine: Optional[AsyncEngine] = None) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self.engine = engine or self._create_engine()

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for the configured database."""
        url = settings.async_db_url
        options: Dict[str, Any] = {"echo": False}  # Set echo to True for SQL query logging
        if not url.startswith("sqlite"):
            options.update(
                pool_pre_ping=True,  # Enable connection health checks
                pool_size=5,
                max_overflow=10,
            )
        return create_async_engine(url, **options)

    def get_session(self) -> SessionMaker:
        """Returns SessionMaker for database sessions."""
        if not self.engine:
            raise ValueError("Database engine wasn't initialized")

        return cast(
            SessionMaker,
            sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autocommit=False,
                autoflush=False,
            ),
        )

    @asynccontextmanager
    async def get_db(self) -> AsyncContextManager[AsyncSession]:
        """Get database session context manager."""
        async_session = self.get_session()
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """Create all tables registered on Base."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created", extra={"tables": sorted(Base.metadata.tables)})


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Turn record store errors into StorageFailure, keeping the cause."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Record store failure", extra={"operation": operation}, exc_info=True)
        raise StorageFailure(operation) from exc
