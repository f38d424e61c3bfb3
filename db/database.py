"""
Async database client for the dashboard.

A ``Database`` owns one async engine and its session factory. Create it
once at process start, hand it to whatever needs to query, and call
``dispose()`` on shutdown.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .model import Base

logger = logging.getLogger(__name__)


class Database:
    """Explicitly managed async engine and session factory."""

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_pre_ping: bool = True,
        pool_options: Optional[Dict[str, Any]] = None,
    ):
        self.url = url
        self.echo = echo
        self.pool_pre_ping = pool_pre_ping
        self.pool_options = pool_options or {}
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @classmethod
    def from_settings(cls, settings) -> "Database":
        """Build a client from a ``config.Settings`` instance."""
        return cls(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            pool_options={
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
                "pool_recycle": settings.DB_POOL_RECYCLE,
            },
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not initialised; call init() first")
        return self._engine

    def init(self) -> None:
        """Create the engine and session factory. Safe to call twice."""
        if self._engine is not None:
            return
        engine_kwargs: Dict[str, Any] = {
            "echo": self.echo,
            "pool_pre_ping": self.pool_pre_ping,
        }
        # SQLite pools reject sizing arguments
        if not self.is_sqlite:
            engine_kwargs.update(self.pool_options)
        self._engine = create_async_engine(self.url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.debug(f"Database engine created for {self.url}")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a fresh session; one per read."""
        if self._session_factory is None:
            raise RuntimeError("Database is not initialised; call init() first")
        async with self._session_factory() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Close every pooled connection. ``init()`` may be called again."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.debug(f"Database engine disposed for {self.url}")

    async def __aenter__(self) -> "Database":
        self.init()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()
