from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from safebox.core.config import settings

# Base class for all models
Base = declarative_base()

# SQLite connections are opened per session so the engine can be shared
# between event loops (uvicorn workers, test clients).
if settings.DATABASE_URL.startswith("sqlite"):
    engine_options = {"connect_args": {"check_same_thread": False}, "poolclass": NullPool}
else:
    engine_options = {"pool_pre_ping": True}

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **engine_options,
)
async_session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_db():
    async with async_session() as session:
        yield session


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the tables."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
