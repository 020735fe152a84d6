"""
Database connection and pool management
"""

import asyncio
import json
import logging
from typing import Optional

import asyncpg

from blog_api.config.settings import DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE, DB_COMMAND_TIMEOUT
from blog_api.utils.errors import StorageError

logger = logging.getLogger(__name__)

CREATE_POSTS_TABLE = """
CREATE TABLE IF NOT EXISTS posts (
    seq BIGSERIAL,
    id TEXT PRIMARY KEY,
    author JSONB NOT NULL,
    title TEXT NOT NULL,
    content TEXT NOT NULL
)
"""

DROP_POSTS_TABLE = "DROP TABLE IF EXISTS posts"


async def _init_connection(conn: asyncpg.Connection):
    """Decode JSONB columns into Python objects"""
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog"
    )


async def create_db_pool(
    database_url: str,
    min_size: int = DB_POOL_MIN_SIZE,
    max_size: int = DB_POOL_MAX_SIZE,
    command_timeout: Optional[float] = DB_COMMAND_TIMEOUT
) -> asyncpg.Pool:
    """Initialize database connection pool"""
    try:
        pool = await asyncpg.create_pool(
            database_url,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
            statement_cache_size=0,  # pgbouncer compatibility
            init=_init_connection
        )

        # Test connection
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")

    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
        logger.error(f"Database initialization failed: {e}")
        raise StorageError(f"Could not connect to database: {e}") from e

    logger.info("Database initialized successfully")
    return pool


async def close_db_pool(pool: Optional[asyncpg.Pool]):
    """Close database connection pool"""
    if pool:
        await pool.close()
    logger.info("Database connections closed")
