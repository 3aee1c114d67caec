"""Shared test helpers: an in-memory notification store and failing engines."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine

from apdacl.database.pool import create_pool
from apdacl.database.schema import create_all

CONSUMER_ID = "6f1c2d4e-8a7b-4c3d-9e0f-1a2b3c4d5e6f"
PROVIDER_ID = "0b9a8c7d-6e5f-4a3b-8c2d-1e0f9a8b7c6d"
OTHER_CONSUMER_ID = "3e4f5a6b-7c8d-4e9f-a0b1-c2d3e4f5a6b7"
ITEM_A = "a1a1a1a1-0000-4000-8000-000000000001"
ITEM_OTHER = "a1a1a1a1-0000-4000-8000-000000000002"
RS_A = "rs://a"
RS_OTHER = "rs://other"

USERS = [
    {"id": CONSUMER_ID, "email": "ana@consumer.org", "first": "Ana", "last": "Rao"},
    {"id": PROVIDER_ID, "email": "jo@x.com", "first": "Jo", "last": "Doe"},
    {"id": OTHER_CONSUMER_ID, "email": "li@consumer.org", "first": "Li", "last": "Wei"},
]
RESOURCES = [
    {"id": ITEM_A, "provider": PROVIDER_ID, "item_type": "RESOURCE", "url": RS_A},
    {"id": ITEM_OTHER, "provider": PROVIDER_ID, "item_type": "RESOURCE_GROUP", "url": RS_OTHER},
]
REQUESTS = [
    {
        "id": "r0000000-0000-4000-8000-000000000001",
        "user": CONSUMER_ID,
        "item": ITEM_A,
        "owner": PROVIDER_ID,
        "status": "PENDING",
        "updated": "2024-03-02 10:00:00",
    },
    {
        "id": "r0000000-0000-4000-8000-000000000002",
        "user": OTHER_CONSUMER_ID,
        "item": ITEM_A,
        "owner": PROVIDER_ID,
        "status": "GRANTED",
        "updated": "2024-03-01 10:00:00",
    },
    {
        "id": "r0000000-0000-4000-8000-000000000003",
        "user": CONSUMER_ID,
        "item": ITEM_OTHER,
        "owner": PROVIDER_ID,
        "status": "REJECTED",
        "updated": "2024-03-03 10:00:00",
    },
]


async def _seed(engine: AsyncEngine) -> None:
    async with engine.begin() as connection:
        await connection.execute(
            text(
                "INSERT INTO user_table (_id, email_id, first_name, last_name) "
                "VALUES (:id, :email, :first, :last)"
            ),
            USERS,
        )
        await connection.execute(
            text(
                "INSERT INTO resource_entity (_id, provider_id, item_type, resource_server_url) "
                "VALUES (:id, :provider, :item_type, :url)"
            ),
            RESOURCES,
        )
        await connection.execute(
            text(
                "INSERT INTO request (_id, user_id, item_id, owner_id, status, updated_at) "
                "VALUES (:id, :user, :item, :owner, :status, :updated)"
            ),
            REQUESTS,
        )


@asynccontextmanager
async def notification_store(seed: bool = True) -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite store with the notification tables (and sample rows)."""
    engine = create_pool({"url": "sqlite+aiosqlite://"})
    try:
        await create_all(engine)
        if seed:
            await _seed(engine)
        yield engine
    finally:
        await engine.dispose()


class _FailingConnection:
    def __init__(self, engine: "FailingEngine"):
        self._engine = engine

    async def __aenter__(self):
        self._engine.acquired += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._engine.released += 1
        return False

    async def execute(self, statement, parameters=None):
        self._engine.executed.append(parameters)
        raise OperationalError(str(statement), parameters, Exception("connection reset by peer"))


class FailingEngine:
    """Stands in for an AsyncEngine whose statements always fail."""

    def __init__(self):
        self.acquired = 0
        self.released = 0
        self.executed = []

    def connect(self):
        return _FailingConnection(self)


class UnreachableEngine:
    """Stands in for an AsyncEngine whose pool cannot hand out a connection."""

    def __init__(self):
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        raise OSError("could not connect to server: Connection refused")
