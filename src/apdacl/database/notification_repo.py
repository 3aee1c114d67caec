"""Repository functions for notification lookups."""

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from apdacl.database.pool import connection_scope
from apdacl.errors import DatabaseExecutionError
from apdacl.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class QueryParameters:
    requester_id: uuid.UUID
    resource_server_url: str

    def bind(self) -> Dict[str, str]:
        return {
            "requester_id": str(self.requester_id),
            "resource_server_url": self.resource_server_url,
        }


@dataclass(frozen=True)
class QueryOutcome:
    """What came back from the store: rows in store order, or the failure message."""

    rows: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]]) -> "QueryOutcome":
        return cls(rows=tuple(rows))

    @classmethod
    def failed(cls, message: str) -> "QueryOutcome":
        return cls(error=message)


async def fetch_notification_rows(
    engine: AsyncEngine,
    parameters: QueryParameters,
    statement: str,
) -> List[Dict[str, Any]]:
    """
    Run one notification statement on a pooled connection.

    Args:
        engine: Connection pool
        parameters: Requester id and resource server URL to bind
        statement: SQL binding :requester_id and :resource_server_url

    Returns:
        One dict per row, in the order the store returned them

    Raises:
        DatabaseExecutionError: Connection, statement or transport failure
    """
    try:
        async with connection_scope(engine) as connection:
            result = await connection.execute(text(statement), parameters.bind())
            rows = [dict(row) for row in result.mappings()]
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
        raise DatabaseExecutionError(str(exc)) from exc

    logger.debug("Fetched %s notification rows for %s", len(rows), parameters.resource_server_url)
    return rows


async def run_notification_query(
    engine: AsyncEngine,
    parameters: QueryParameters,
    statement: str,
) -> QueryOutcome:
    """Like fetch_notification_rows, but reports failure as an outcome instead of raising."""
    try:
        rows = await fetch_notification_rows(engine, parameters, statement)
    except DatabaseExecutionError as exc:
        logger.error("Error response : %s", exc)
        return QueryOutcome.failed(str(exc))
    return QueryOutcome.from_rows(rows)
