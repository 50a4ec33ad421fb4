"""Async SQLAlchemy engine and session handling for the rule store.

SQLite through aiosqlite is the default backend; any async URL SQLAlchemy
understands (for example ``postgresql+asyncpg://``) works as well.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import make_url, text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ruleforge.core.config import Settings, get_settings
from ruleforge.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model."""


def _is_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite"


def _engine_options(settings: Settings, url: URL) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    In-memory SQLite gets SQLAlchemy's default single-connection pool, so the
    pool sizing settings only apply to file databases and servers.
    """
    options: dict[str, Any] = {"echo": settings.db_echo}
    if _is_sqlite(url):
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
    )
    return options


class DatabaseManager:
    """Owns the engine and session factory, both created lazily."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.url = make_url(self.settings.database_url)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.url, **_engine_options(self.settings, self.url)
            )
            logger.info(
                "Database engine created",
                database_url=self.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    def ensure_sqlite_directory(self) -> None:
        """Create the parent directory of a file-backed SQLite database."""
        if not _is_sqlite(self.url) or self.url.database in (None, "", ":memory:"):
            return
        directory = Path(self.url.database).parent
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug("SQLite directory ready", path=str(directory))

    async def create_tables(self) -> None:
        """Create every table registered on ``Base.metadata``.

        Development convenience only; deployed databases are migrated with
        Alembic.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created", tables=sorted(Base.metadata.tables))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that is rolled back if the block raises."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False
        return True

    async def disconnect(self) -> None:
        """Dispose of the engine; the next access creates a new one."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Return the process-wide database manager."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db_manager().session() as session:
        yield session


async def init_database() -> None:
    """Prepare the database at startup.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    # Registers the rules table on Base.metadata
    from ruleforge.infrastructure.persistence.models import RuleModel  # noqa: F401

    db = get_db_manager()
    db.ensure_sqlite_directory()

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    if db.settings.is_development:
        await db.create_tables()
    else:
        logger.info("Skipping table creation outside development; run alembic upgrade head")


async def close_database() -> None:
    """Release database connections at shutdown."""
    await get_db_manager().disconnect()
