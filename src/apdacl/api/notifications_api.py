"""Notifications API: fetch access-request notifications for the calling user."""

from functools import partial
from typing import TYPE_CHECKING, Optional

from ..database.notification_repo import QueryParameters, run_notification_query
from ..database.queries import NotificationQueries
from ..errors import NotificationFetchError
from ..notifications.assembler import assemble_records
from ..notifications.envelope import (
    FailureEnvelope,
    ResponseEnvelope,
    SuccessEnvelope,
    build_envelope,
)
from ..notifications.perspective import classify
from ..users.models import User
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = get_logger(__name__)

DEFAULT_QUERIES = NotificationQueries()


async def build_notification_envelope(
    engine: "AsyncEngine",
    user: User,
    queries: Optional[NotificationQueries] = None,
) -> ResponseEnvelope:
    """
    Run the lookup for ``user`` and return the envelope, success or failure.

    Args:
        engine: Connection pool
        user: Resolved caller identity
        queries: Statements to use (defaults to the built-in ones)

    Returns:
        SuccessEnvelope with one record per row, or a FailureEnvelope
    """
    classification = classify(user.role)
    statement = (queries or DEFAULT_QUERIES).statement_for(classification.query)
    parameters = QueryParameters(user.requester_uuid, user.resource_server_url)
    logger.debug(
        "Fetching %s for role=%s perspective=%s",
        classification.query.value,
        getattr(user.role, "value", user.role),
        classification.perspective.value,
    )

    outcome = await run_notification_query(engine, parameters, statement)
    assemble = partial(
        assemble_records,
        caller=user.party_info(),
        perspective=classification.perspective,
        resource_server_url=user.resource_server_url,
    )
    envelope = build_envelope(outcome, assemble, user.resource_server_url)

    if isinstance(envelope, FailureEnvelope):
        if outcome.succeeded:
            logger.error("No Request found for the resource server: %s", user.resource_server_url)
        logger.error("Failure while executing GET notifications request")
    else:
        logger.info("success while executing GET notifications request")
    return envelope


async def get_notifications(
    engine: "AsyncEngine",
    user: User,
    queries: Optional[NotificationQueries] = None,
) -> SuccessEnvelope:
    """
    Fetch notifications for ``user``.

    Consumers (and their delegates) get the requests they made, with the
    provider of each item attached. Everyone else gets the requests made to
    them, with the requesting consumer attached.

    Raises:
        NotificationFetchError: Nothing found for the resource server, or the
            lookup failed. The error carries the failure envelope.
    """
    envelope = await build_notification_envelope(engine, user, queries)
    if isinstance(envelope, FailureEnvelope):
        raise NotificationFetchError(envelope)
    return envelope
