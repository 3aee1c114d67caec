"""Exception hierarchy for apdacl."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apdacl.notifications.envelope import FailureEnvelope


class ApdAclError(Exception):
    """Base exception for all apdacl errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ApdAclError):
    """Configuration file missing a required value or malformed."""


class DatabaseExecutionError(ApdAclError):
    """Connection acquisition, statement execution or transport failed.

    The executor does not distinguish between these causes; the message is the
    underlying driver/pool message.
    """


class NotificationFetchError(ApdAclError):
    """Notifications could not be returned to the caller.

    The message is the JSON encoding of the failure object so it can be handed
    straight to a response writer; ``envelope`` keeps the structured form.
    """

    def __init__(self, envelope: FailureEnvelope) -> None:
        super().__init__(envelope.encode())
        self.envelope = envelope

    @property
    def status_code(self) -> int:
        return self.envelope.status_code
