"""Response vocabulary and the success/failure envelopes returned to callers."""

import json
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from apdacl.database.notification_repo import QueryOutcome

FAILURE_MESSAGE = "Notifications could not be fetched"
NOT_FOUND_DETAIL = "Access request not found, for the server : "


class ResponseUrn(Enum):
    SUCCESS_URN = ("urn:dx:acl:success", "Success")
    RESOURCE_NOT_FOUND_URN = ("urn:dx:acl:ResourceNotFound", "Resource not found")
    DB_ERROR_URN = ("urn:dx:acl:DatabaseError", "Database error")
    INVALID_PARAM_URN = ("urn:dx:acl:invalidParameter", "Invalid parameter passed")
    BAD_REQUEST_URN = ("urn:dx:acl:badRequest", "Bad request")
    FORBIDDEN_URN = ("urn:dx:acl:forbidden", "Forbidden to access the resource")
    INTERNAL_SERVER_ERROR = ("urn:dx:acl:internalServerError", "Internal Server Error")

    @property
    def urn(self) -> str:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


class HttpStatusCode(Enum):
    SUCCESS = (200, "Success")
    BAD_REQUEST = (400, "Bad Request")
    UNAUTHORIZED = (401, "Not Authorized")
    FORBIDDEN = (403, "Forbidden")
    NOT_FOUND = (404, "Not Found")
    INTERNAL_SERVER_ERROR = (500, "Internal Server Error")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def description(self) -> str:
        return self.value[1]


class NotificationResult(BaseModel):
    type: str
    title: str
    result: List[Dict[str, Any]]


class SuccessEnvelope(BaseModel):
    """``{result: {type, title, result: [...]}, statusCode}``"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    result: NotificationResult
    status_code: int = Field(default=HttpStatusCode.SUCCESS.code, alias="statusCode")

    @property
    def records(self) -> List[Dict[str, Any]]:
        return self.result.result

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FailureEnvelope(BaseModel):
    """Failure object ``{type, title, detail}``; ``status_code`` travels beside it."""
    model_config = ConfigDict(frozen=True)

    type: int
    title: str
    detail: str
    status_code: int = Field(exclude=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    def encode(self) -> str:
        return json.dumps(self.to_json())


ResponseEnvelope = Union[SuccessEnvelope, FailureEnvelope]


def success_envelope(records: List[Dict[str, Any]]) -> SuccessEnvelope:
    return SuccessEnvelope(
        result=NotificationResult(
            type=ResponseUrn.SUCCESS_URN.urn,
            title=ResponseUrn.SUCCESS_URN.message,
            result=records,
        ),
        status_code=HttpStatusCode.SUCCESS.code,
    )


def not_found_failure(resource_server_url: str) -> FailureEnvelope:
    return FailureEnvelope(
        type=HttpStatusCode.NOT_FOUND.code,
        title=ResponseUrn.RESOURCE_NOT_FOUND_URN.urn,
        detail=NOT_FOUND_DETAIL + str(resource_server_url),
        status_code=HttpStatusCode.NOT_FOUND.code,
    )


def database_failure() -> FailureEnvelope:
    return FailureEnvelope(
        type=HttpStatusCode.INTERNAL_SERVER_ERROR.code,
        title=ResponseUrn.DB_ERROR_URN.urn,
        detail=FAILURE_MESSAGE + ", Failure while executing query",
        status_code=HttpStatusCode.INTERNAL_SERVER_ERROR.code,
    )


def build_envelope(
    outcome: "QueryOutcome",
    assemble: Callable[[Sequence[Dict[str, Any]]], List[Dict[str, Any]]],
    resource_server_url: str,
) -> ResponseEnvelope:
    """
    Decide the envelope for a query outcome.

    ``assemble`` is only called when there is at least one row, so nothing is
    assembled for a failed or empty lookup.

    Args:
        outcome: Result of running the notification statement
        assemble: Callable turning the raw rows into outgoing records
        resource_server_url: Scope of the lookup, named in the not-found detail

    Returns:
        SuccessEnvelope, or a FailureEnvelope for execution errors and empty results
    """
    if not outcome.succeeded:
        return database_failure()
    if not outcome.rows:
        # Empty result is reported as a failure, same as the existing API
        return not_found_failure(resource_server_url)
    return success_envelope(assemble(outcome.rows))
