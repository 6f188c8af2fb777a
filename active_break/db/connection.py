"""Database connection management"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool
from active_break.config import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE
from active_break.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class Database:
    """
    Connection pool handle for the local store.

    One instance is created at startup and passed explicitly to the query
    functions, services and schedulers that need it.
    """

    def __init__(
        self,
        connection_string: str = DATABASE_URL,
        min_size: int = DB_POOL_MIN_SIZE,
        max_size: int = DB_POOL_MAX_SIZE,
    ):
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self._pool: Optional[AsyncConnectionPool] = None

    async def init_pool(self) -> None:
        """
        Initialize connection pool and wait for the first connections

        Raises:
            DatabaseConnectionError: The store could not be reached
        """
        logger.info("Initializing database connection pool")
        pool = AsyncConnectionPool(
            self.connection_string,
            min_size=self.min_size,
            max_size=self.max_size,
            open=False
        )
        try:
            await pool.open(wait=True)
        except psycopg.Error as e:
            await pool.close()
            raise wrap_external_exception(e, operation="init_pool") from e
        self._pool = pool

    async def close_pool(self) -> None:
        """Close connection pool"""
        if self._pool:
            logger.info("Closing database connection pool")
            await self._pool.close()
            self._pool = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """Get database connection from pool"""
        if not self._pool:
            raise RuntimeError("Database pool not initialized")

        async with self._pool.connection() as conn:
            conn.row_factory = dict_row
            yield conn
