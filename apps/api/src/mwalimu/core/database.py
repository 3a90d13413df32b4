"""
Database Configuration

Async SQLAlchemy engine and session factory for PostgreSQL.

The Database object is created once by the application lifespan and handed
to whatever needs a session factory (the school store, background jobs).
Nothing here is initialised at import time.
"""

import logging
from datetime import datetime

from sqlalchemy import DateTime, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from mwalimu.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class BaseModel(Base):
    """
    Abstract base with a UUID primary key and timestamps.

    The id is generated by the database on insert so that the record
    returned from an insert always carries the store-assigned identifier.
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Database:
    """Owns the async engine and the session factory built on it."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            pool_pre_ping=True,
        )
        return cls(engine)

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.session_maker() as session:
            await session.execute(text("SELECT 1"))

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")
