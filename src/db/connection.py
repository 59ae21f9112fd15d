"""PostgreSQL connection pool for the pizza finder backend"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool
from src.config import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE
from src.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class Database:
    """
    Owns one async connection pool

    Created at application startup and passed explicitly to services and
    query functions; there is no module-level instance.
    """

    def __init__(
        self,
        connection_string: str = DATABASE_URL,
        min_size: int = DB_POOL_MIN_SIZE,
        max_size: int = DB_POOL_MAX_SIZE
    ):
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self._pool: Optional[AsyncConnectionPool] = None

    async def init_pool(self) -> None:
        """Open the pool and wait for the minimum number of connections"""
        logger.info(f"Opening database pool (min={self.min_size}, max={self.max_size})")
        self._pool = AsyncConnectionPool(
            self.connection_string,
            min_size=self.min_size,
            max_size=self.max_size,
            open=False
        )
        await self._pool.open(wait=True)

    async def close_pool(self) -> None:
        if self._pool:
            logger.info("Closing database pool")
            await self._pool.close()
            self._pool = None

    @property
    def is_ready(self) -> bool:
        return self._pool is not None

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """
        Borrow a connection; rows come back as dicts

        Raises:
            QueryError: when psycopg fails inside the block (the transaction
                is rolled back by the pool)
        """
        if not self._pool:
            raise RuntimeError("Database pool not initialized")

        async with self._pool.connection() as conn:
            conn.row_factory = dict_row
            try:
                yield conn
            except psycopg.Error as e:
                raise wrap_external_exception(e, operation="database") from e

    async def ping(self) -> bool:
        """True when a trivial query round-trips"""
        try:
            async with self.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT 1")
                    await cur.fetchone()
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True
