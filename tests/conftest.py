"""Pytest configuration and fixtures."""

import pytest

from apdacl.users.models import Role, User

from .helpers import CONSUMER_ID, PROVIDER_ID, RS_A


@pytest.fixture
def consumer_user():
    return User(
        user_id=CONSUMER_ID,
        first_name="Ana",
        last_name="Rao",
        email_id="ana@consumer.org",
        resource_server_url=RS_A,
        role=Role.CONSUMER,
    )


@pytest.fixture
def provider_user():
    return User(
        user_id=PROVIDER_ID,
        first_name="Jo",
        last_name="Doe",
        email_id="jo@x.com",
        resource_server_url=RS_A,
        role=Role.PROVIDER,
    )


@pytest.fixture(autouse=True)
def _clear_database_url(monkeypatch):
    monkeypatch.delenv("APDACL_DATABASE_URL", raising=False)
