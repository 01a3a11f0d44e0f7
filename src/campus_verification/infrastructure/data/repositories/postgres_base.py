import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from functools import wraps
from typing import Any, Dict

import asyncpg
from asyncpg import Pool

from ....domain.errors import RecordStoreError, VerificationError

# Errors raised by the driver or the network that mean the store failed
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError, OSError)


def measure_performance(operation_name: str):
    """Decorator to measure query performance and surface store failures"""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            start_time = time.time()
            try:
                result = await func(self, *args, **kwargs)
                execution_time = time.time() - start_time

                if execution_time > 1.0:  # Log slow queries
                    self.logger.warning(
                        f"Slow query detected: {operation_name} took {execution_time:.2f}s"
                    )

                return result
            except VerificationError:
                raise
            except DATABASE_ERRORS as e:
                execution_time = time.time() - start_time
                self.logger.error(
                    f"Query failed: {operation_name} took {execution_time:.2f}s, error: {e}"
                )
                raise RecordStoreError(f"{operation_name} failed: {e}") from e
        return wrapper
    return decorator


def rows_affected(status: str) -> int:
    """Parse the row count out of an asyncpg command status such as 'UPDATE 1'"""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class PostgresRepository:
    """Shared connection handling for the asyncpg repositories"""

    def __init__(self, connection_pool: Pool):
        self.pool = connection_pool
        self.logger = logging.getLogger(self.__class__.__module__)
        self._connection_timeout = 30.0

    @asynccontextmanager
    async def get_connection(self):
        """Context manager for database connections with proper error handling"""
        connection = None
        try:
            connection = await asyncio.wait_for(
                self.pool.acquire(),
                timeout=self._connection_timeout
            )
            yield connection
        except asyncio.TimeoutError:
            self.logger.error("Database connection timeout")
            raise
        finally:
            if connection:
                await self.pool.release(connection)

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check on database connection"""
        try:
            async with self.get_connection() as conn:
                start_time = time.time()
                await conn.fetchval("SELECT 1")
                response_time = time.time() - start_time

                return {
                    "status": "healthy",
                    "response_time_ms": response_time * 1000,
                    "timestamp": datetime.utcnow().isoformat()
                }
        except DATABASE_ERRORS as e:
            self.logger.error(f"Health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat()
            }
