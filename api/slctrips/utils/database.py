"""
Postgres (Supabase) engine and request-scoped sessions
"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
import logging

from slctrips.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    pool_recycle=1800,
    pool_timeout=10,
    connect_args={
        "command_timeout": 30,
        "statement_cache_size": 0,  # Supabase pooler runs in transaction mode
        "server_settings": {"statement_timeout": "30000"},
    },
)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

Base = declarative_base()


async def init_db():
    """Fail fast at startup if the destination database is unreachable"""
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Destination database reachable")


async def close_db():
    await engine.dispose()
    logger.info("Database pool disposed")


async def get_db() -> AsyncSession:
    """
    One session per request: committed when the handler returns,
    rolled back when it raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
