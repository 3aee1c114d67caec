"""Parameterized statements for notification lookups.

Each statement binds ``:requester_id`` and ``:resource_server_url``. Consumer
rows carry the owner's name and email; provider rows carry the consumer's.
Both select ``consumerId`` and ``ownerId``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from apdacl.errors import ConfigurationError
from apdacl.notifications.perspective import QuerySelector

_REQUEST_COLUMNS = """
    R._id AS "requestId",
    R.item_id AS "itemId",
    RE.item_type AS "itemType",
    R.status AS "status",
    R.expiry_at AS "expiryAt",
    R.constraints AS "constraints",
    R.additional_info AS "additionalInfo",
    R.created_at AS "createdAt",
    R.updated_at AS "updatedAt",
    R.user_id AS "consumerId",
    R.owner_id AS "ownerId"
"""

GET_CONSUMER_NOTIFICATION_QUERY = f"""
SELECT {_REQUEST_COLUMNS},
    U.first_name AS "ownerFirstName",
    U.last_name AS "ownerLastName",
    U.email_id AS "ownerEmailId"
FROM request R
JOIN user_table U ON U._id = R.owner_id
JOIN resource_entity RE ON RE._id = R.item_id
WHERE R.user_id = :requester_id
  AND RE.resource_server_url = :resource_server_url
ORDER BY R.updated_at DESC
"""

GET_PROVIDER_NOTIFICATION_QUERY = f"""
SELECT {_REQUEST_COLUMNS},
    U.first_name AS "consumerFirstName",
    U.last_name AS "consumerLastName",
    U.email_id AS "consumerEmailId"
FROM request R
JOIN user_table U ON U._id = R.user_id
JOIN resource_entity RE ON RE._id = R.item_id
WHERE R.owner_id = :requester_id
  AND RE.resource_server_url = :resource_server_url
ORDER BY R.updated_at DESC
"""


@dataclass(frozen=True)
class NotificationQueries:
    consumer_notifications: str = GET_CONSUMER_NOTIFICATION_QUERY
    provider_notifications: str = GET_PROVIDER_NOTIFICATION_QUERY

    def statement_for(self, selector: QuerySelector) -> str:
        if selector is QuerySelector.CONSUMER_NOTIFICATIONS:
            return self.consumer_notifications
        return self.provider_notifications

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "NotificationQueries":
        """Apply statement overrides from the ``queries`` config section."""
        overrides = (config or {}).get("queries") or {}
        if not isinstance(overrides, dict):
            raise ConfigurationError("'queries' must be a mapping of selector name to SQL")

        statements: Dict[str, str] = {}
        for selector in QuerySelector:
            statement = overrides.get(selector.value)
            if statement is None:
                continue
            if not isinstance(statement, str) or not statement.strip():
                raise ConfigurationError(f"Query override '{selector.value}' must be a non-empty string")
            statements[selector.value] = statement

        unknown = set(overrides) - {selector.value for selector in QuerySelector}
        if unknown:
            raise ConfigurationError(f"Unknown query overrides: {', '.join(sorted(unknown))}")
        return cls(**statements)
