"""Asyncpg connection utilities."""
from pathlib import Path
from typing import Optional

import asyncpg

from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

_pool: Optional[asyncpg.pool.Pool] = None

SCHEMA_PATH = Path(__file__).parent / "schema.sql"
CATALOG_TABLES = ("book", "genre", "book_genre")


def _password() -> Optional[str]:
    # Empty password means trust auth for local development
    if settings.db_password and settings.db_password.strip():
        return settings.db_password.strip()
    return None


async def ensure_database_exists() -> None:
    """Create the database if it doesn't exist."""
    try:
        conn = await asyncpg.connect(
            host=settings.db_host,
            port=settings.db_port,
            user=settings.db_user,
            password=_password(),
            database="postgres",
            timeout=settings.db_timeout_seconds,
        )
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        # The role may not be allowed on 'postgres'; the pool connects directly instead
        logger.warning(f"Could not check database via 'postgres' database: {e}")
        return

    try:
        db_exists = await conn.fetchval(
            "SELECT 1 FROM pg_database WHERE datname = $1",
            settings.db_name,
        )
        if not db_exists:
            await conn.execute(f'CREATE DATABASE "{settings.db_name}"')
            logger.info(f"Created database: {settings.db_name}")
        else:
            logger.info(f"Database exists: {settings.db_name}")
    finally:
        await conn.close()


async def ensure_schema_exists(pool: asyncpg.pool.Pool) -> None:
    """Create tables and indexes if they don't exist."""
    async with pool.acquire() as conn:
        table_count = await conn.fetchval(
            """
            SELECT COUNT(*)
            FROM information_schema.tables
            WHERE table_schema = 'public'
            AND table_name = ANY($1::text[])
            """,
            list(CATALOG_TABLES),
        )

        if table_count < len(CATALOG_TABLES):
            await conn.execute(SCHEMA_PATH.read_text())
            logger.info("Database schema created")
        else:
            logger.info("Database schema already exists")


async def init_db() -> asyncpg.pool.Pool:
    """Initialize database connection pool and ensure database/schema exist."""
    global _pool
    if _pool is None:
        await ensure_database_exists()

        _pool = await asyncpg.create_pool(
            host=settings.db_host,
            port=settings.db_port,
            user=settings.db_user,
            password=_password(),
            database=settings.db_name,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            timeout=settings.db_timeout_seconds,
        )
        logger.info(
            f"Connection pool ready ({settings.db_host}:{settings.db_port}/{settings.db_name})"
        )

        await ensure_schema_exists(_pool)

    return _pool


async def get_pool() -> asyncpg.pool.Pool:
    if _pool is None:
        return await init_db()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Connection pool closed")
