"""Role classification: which side of a notification the caller sits on."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from apdacl.users.models import Role


class Perspective(str, Enum):
    CONSUMER = "consumer"
    PROVIDER = "provider"

    @property
    def opposite(self) -> "Perspective":
        if self is Perspective.CONSUMER:
            return Perspective.PROVIDER
        return Perspective.CONSUMER


class QuerySelector(str, Enum):
    """Names the parameterized statement to run."""

    CONSUMER_NOTIFICATIONS = "consumer_notifications"
    PROVIDER_NOTIFICATIONS = "provider_notifications"


@dataclass(frozen=True)
class RoleClassification:
    perspective: Perspective
    query: QuerySelector


CONSUMER_VIEW = RoleClassification(Perspective.CONSUMER, QuerySelector.CONSUMER_NOTIFICATIONS)
PROVIDER_VIEW = RoleClassification(Perspective.PROVIDER, QuerySelector.PROVIDER_NOTIFICATIONS)


def classify(role: Union[Role, str, None]) -> RoleClassification:
    """
    Map a caller role to its perspective and statement.

    Consumers and consumer delegates see the requests they issued. Every other
    role, including provider delegates and roles this module does not know,
    sees the requests addressed to it.
    """
    if isinstance(role, str) and not isinstance(role, Role):
        try:
            role = Role(role)
        except ValueError:
            return PROVIDER_VIEW

    if role in (Role.CONSUMER, Role.CONSUMER_DELEGATE):
        return CONSUMER_VIEW
    return PROVIDER_VIEW
