"""Tests for the notification query executor."""

import uuid

import pytest

from apdacl.database.notification_repo import (
    QueryParameters,
    fetch_notification_rows,
    run_notification_query,
)
from apdacl.database.pool import create_pool
from apdacl.database.queries import (
    GET_CONSUMER_NOTIFICATION_QUERY,
    GET_PROVIDER_NOTIFICATION_QUERY,
)
from apdacl.errors import DatabaseExecutionError

from .helpers import (
    CONSUMER_ID,
    ITEM_A,
    PROVIDER_ID,
    RS_A,
    RS_OTHER,
    FailingEngine,
    UnreachableEngine,
    notification_store,
)

pytestmark = pytest.mark.asyncio


async def test_consumer_query_returns_owner_columns():
    params = QueryParameters(uuid.UUID(CONSUMER_ID), RS_A)
    async with notification_store() as engine:
        rows = await fetch_notification_rows(engine, params, GET_CONSUMER_NOTIFICATION_QUERY)

    assert len(rows) == 1
    row = rows[0]
    assert row["status"] == "PENDING"
    assert row["itemId"] == ITEM_A
    assert row["ownerId"] == PROVIDER_ID
    assert row["consumerId"] == CONSUMER_ID
    assert row["ownerFirstName"] == "Jo"
    assert row["ownerLastName"] == "Doe"
    assert row["ownerEmailId"] == "jo@x.com"


async def test_provider_query_returns_consumer_columns_in_store_order():
    params = QueryParameters(uuid.UUID(PROVIDER_ID), RS_A)
    async with notification_store() as engine:
        rows = await fetch_notification_rows(engine, params, GET_PROVIDER_NOTIFICATION_QUERY)

    assert [row["status"] for row in rows] == ["PENDING", "GRANTED"]
    assert [row["consumerFirstName"] for row in rows] == ["Ana", "Li"]


async def test_query_is_scoped_to_resource_server():
    params = QueryParameters(uuid.UUID(CONSUMER_ID), RS_OTHER)
    async with notification_store() as engine:
        rows = await fetch_notification_rows(engine, params, GET_CONSUMER_NOTIFICATION_QUERY)

    assert [row["status"] for row in rows] == ["REJECTED"]


async def test_zero_rows_is_not_an_error():
    params = QueryParameters(uuid.UUID(CONSUMER_ID), "rs://nowhere")
    async with notification_store() as engine:
        outcome = await run_notification_query(engine, params, GET_CONSUMER_NOTIFICATION_QUERY)

    assert outcome.succeeded
    assert outcome.rows == ()


async def test_bad_statement_raises_database_execution_error():
    params = QueryParameters(uuid.UUID(CONSUMER_ID), RS_A)
    async with notification_store() as engine:
        with pytest.raises(DatabaseExecutionError):
            await fetch_notification_rows(
                engine,
                params,
                (
                    "SELECT * FROM no_such_table "
                    "WHERE x = :requester_id AND y = :resource_server_url"
                ),
            )


async def test_connection_released_when_statement_fails():
    engine = FailingEngine()
    params = QueryParameters(uuid.UUID(CONSUMER_ID), RS_A)

    with pytest.raises(DatabaseExecutionError, match="connection reset by peer"):
        await fetch_notification_rows(engine, params, GET_CONSUMER_NOTIFICATION_QUERY)

    assert engine.acquired == 1
    assert engine.released == 1
    assert engine.executed == [{"requester_id": CONSUMER_ID, "resource_server_url": RS_A}]


async def test_run_notification_query_reports_failure_as_outcome():
    engine = FailingEngine()
    params = QueryParameters(uuid.UUID(CONSUMER_ID), RS_A)

    outcome = await run_notification_query(engine, params, GET_CONSUMER_NOTIFICATION_QUERY)

    assert not outcome.succeeded
    assert "connection reset by peer" in outcome.error
    assert outcome.rows == ()


async def test_connection_acquisition_failure_raises_database_execution_error():
    engine = UnreachableEngine()
    params = QueryParameters(uuid.UUID(CONSUMER_ID), RS_A)

    with pytest.raises(DatabaseExecutionError, match="Connection refused"):
        await fetch_notification_rows(engine, params, GET_CONSUMER_NOTIFICATION_QUERY)
    assert engine.attempts == 1


async def test_unopenable_database_file_is_reported_as_failure(tmp_path):
    engine = create_pool({"url": f"sqlite+aiosqlite:///{tmp_path}/missing/dir/apd.db"})
    params = QueryParameters(uuid.UUID(CONSUMER_ID), RS_A)
    try:
        outcome = await run_notification_query(engine, params, GET_CONSUMER_NOTIFICATION_QUERY)
    finally:
        await engine.dispose()

    assert not outcome.succeeded
    assert outcome.error
