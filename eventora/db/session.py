from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from eventora.core.config import settings


def _engine_options(url: str) -> dict:
    options = {"echo": False, "future": True, "pool_pre_ping": True}
    # SQLite (tests, local runs) has no server-side pool to size
    if not url.startswith("sqlite"):
        options.update(
            pool_size=20,              # Number of permanent connections to maintain
            max_overflow=10,           # Maximum number of connections to allow beyond pool_size
            pool_recycle=3600,         # Recycle connections after 1 hour (3600 seconds)
        )
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()


async def init_models() -> None:
    """Create any missing tables."""
    import eventora.db.models  # noqa: F401  registers every table on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
