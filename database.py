"""
Database connection management and utilities
Async PostgreSQL operations using asyncpg
"""

import asyncpg
import json
import logging
from typing import Optional, List, Any
from contextlib import asynccontextmanager
from pathlib import Path

from config import DatabaseConfig

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).parent / "schema.sql"


async def _init_connection(conn):
    """Decode JSONB columns to Python objects and encode dicts/lists back"""
    await conn.set_type_codec(
        'jsonb',
        encoder=json.dumps,
        decoder=json.loads,
        schema='pg_catalog',
    )


class DatabaseConnection:
    """
    Manages PostgreSQL connection pool and provides database operations
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Initialize connection pool"""
        if self.pool is not None:
            logger.warning("Connection pool already initialized")
            return

        try:
            # asyncpg expects: True (require SSL), False (disable SSL), or 'prefer'
            if self.config.ssl_mode == 'require':
                ssl_setting = True
            elif self.config.ssl_mode == 'disable':
                ssl_setting = False
            else:
                ssl_setting = 'prefer'

            self.pool = await asyncpg.create_pool(
                host=self.config.host,
                port=self.config.port,
                database=self.config.database,
                user=self.config.user,
                password=self.config.password,
                min_size=self.config.min_pool_size,
                max_size=self.config.max_pool_size,
                command_timeout=self.config.command_timeout,
                ssl=ssl_setting,
                init=_init_connection,
            )

            logger.info(f"Connected to PostgreSQL at {self.config.host}:{self.config.port}/{self.config.database}")

        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def disconnect(self):
        """Close connection pool"""
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Database connection pool closed")

    @asynccontextmanager
    async def acquire(self):
        """
        Acquire a connection from the pool.

        Usage:
            async with db.acquire() as conn:
                rows = await conn.fetch("SELECT * FROM time_entry_logs")

        The connection is returned to the pool even if an exception occurs.
        """
        if self.pool is None:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self.pool.acquire() as connection:
            try:
                yield connection
            except Exception as e:
                logger.error(f"Error during database operation: {e}", exc_info=True)
                try:
                    await connection.reset()
                except Exception as reset_error:
                    logger.error(f"Failed to reset connection: {reset_error}")
                raise

    async def execute(self, query: str, *args, timeout: Optional[float] = None) -> str:
        """Execute a query without returning results; returns the status string"""
        async with self.acquire() as conn:
            return await conn.execute(query, *args, timeout=timeout)

    async def fetch(self, query: str, *args, timeout: Optional[float] = None) -> List[asyncpg.Record]:
        async with self.acquire() as conn:
            return await conn.fetch(query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: Optional[float] = None) -> Optional[asyncpg.Record]:
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args, timeout=timeout)

    async def fetchval(self, query: str, *args, column: int = 0, timeout: Optional[float] = None) -> Any:
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args, column=column, timeout=timeout)

    async def check_connection(self) -> bool:
        try:
            result = await self.fetchval("SELECT 1")
            return result == 1
        except Exception as e:
            logger.error(f"Connection check failed: {e}")
            return False

    async def apply_schema(self, schema_file: Path = SCHEMA_FILE):
        """Apply schema.sql in a single transaction"""
        logger.info(f"Applying schema from {schema_file}...")
        schema_sql = Path(schema_file).read_text(encoding='utf-8')
        async with self.acquire() as conn:
            async with conn.transaction():
                await conn.execute(schema_sql)
        logger.info("Schema applied successfully")
