"""
Database configuration for the Life OS backend.

Tables live in Supabase Postgres, which owns schema, row level security and
``updated_at`` triggers. These mappings mirror that schema; every row belongs
to a Supabase auth user through ``user_id``.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

from .config import settings
from .core.database_types import GUID

logger = logging.getLogger(__name__)

engine_options = {"echo": settings.app_debug, "future": True}
if settings.database_url.startswith("postgresql"):
    engine_options.update(pool_pre_ping=True, pool_recycle=3600)

engine = create_async_engine(settings.database_url, **engine_options)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

Base = declarative_base()


class TimestampMixin:
    """Mixin to add created and updated timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class UserOwned:
    """Mixin for rows owned by a single Supabase user.

    - id: UUID primary key generated client side
    - user_id: ``auth.users.id`` of the owner, used for row scoping
    """

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(GUID(), nullable=True, index=True)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create tables for local development databases.

    Supabase migrations own the production schema.
    """
    from .modules.dashboard import models as dashboard_models  # noqa: F401
    from .modules.fitness import models as fitness_models  # noqa: F401
    from .modules.health import models as health_models  # noqa: F401
    from .modules.productivity import models as productivity_models  # noqa: F401
    from .modules.real_estate import models as real_estate_models  # noqa: F401
    from .modules.wealth import models as wealth_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
