"""Async database engine and session factory, owned by the application."""

import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from notehub.core.config import Settings
from notehub.core.errors import SchemaVersionError

logger = logging.getLogger(__name__)

# Columns the running code depends on; older databases must be migrated first.
REQUIRED_COLUMNS: dict[str, set[str]] = {
    "tenants": {"id", "slug", "name", "plan", "created_at"},
    "users": {"id", "email", "password_hash", "role", "tenant_id", "created_at"},
    "notes": {
        "id", "title", "content", "tenant_id", "user_id",
        "updated_by", "created_at", "updated_at",
    },
}


class Database:
    """Store handle: one engine with a bounded pool plus a session factory."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.database_url
        kwargs: dict = {"echo": False}
        if not url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_pre_ping=True,
            )
        if url.startswith("postgresql+asyncpg"):
            kwargs["connect_args"] = {"command_timeout": settings.db_command_timeout}
        return cls(create_async_engine(url, **kwargs))

    async def create_all(self) -> None:
        """Create all tables. Use Alembic migrations in production."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def verify_schema(self) -> None:
        """Fail fast if a table or column the code relies on is missing."""
        async with self.engine.connect() as conn:
            missing = await conn.run_sync(_missing_columns)
        if missing:
            detail = ", ".join(sorted(missing))
            raise SchemaVersionError(
                f"Database schema is out of date (missing: {detail}); run `alembic upgrade head`"
            )
        logger.info("Database schema verified")

    async def dispose(self) -> None:
        await self.engine.dispose()


def _missing_columns(sync_conn) -> list[str]:
    inspector = inspect(sync_conn)
    tables = set(inspector.get_table_names())
    missing: list[str] = []
    for table, columns in REQUIRED_COLUMNS.items():
        if table not in tables:
            missing.append(table)
            continue
        present = {col["name"] for col in inspector.get_columns(table)}
        missing.extend(f"{table}.{col}" for col in columns - present)
    return missing


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session."""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
