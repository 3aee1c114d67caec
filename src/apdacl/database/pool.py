from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from apdacl.utils.logging import get_logger

logger = get_logger(__name__)


def create_pool(settings: Dict[str, Any]) -> AsyncEngine:
    """
    Create the shared connection pool.

    Args:
        settings: Normalized ``database`` section (see config.loader.get_database_settings)

    Returns:
        AsyncEngine whose pool hands out one connection per lookup
    """
    url = settings["url"]
    engine_kwargs: Dict[str, Any] = {"echo": bool(settings.get("echo", False))}
    if url.startswith("sqlite"):
        # In-memory SQLite only exists on a single connection
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update(
            pool_size=settings.get("pool_size", 5),
            max_overflow=settings.get("max_overflow", 0),
            pool_timeout=settings.get("pool_timeout_seconds", 30),
            pool_pre_ping=True,
        )
    logger.debug("Creating connection pool for %s", _redact(url))
    return create_async_engine(url, **engine_kwargs)


@asynccontextmanager
async def connection_scope(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    """
    Borrow one pooled connection for the duration of the block.

    The connection goes back to the pool on every exit path, including
    errors raised by the statement. Nothing is committed: lookups are reads.

    Usage:
        async with connection_scope(engine) as connection:
            result = await connection.execute(statement, params)
    """
    async with engine.connect() as connection:
        yield connection


def _redact(url: str) -> str:
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"
