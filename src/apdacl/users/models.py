"""Pydantic models for the requesting user and the identity objects in responses."""

import uuid
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    """Roles a caller can hold when asking for notifications."""

    CONSUMER = "consumer"
    CONSUMER_DELEGATE = "consumer_delegate"
    PROVIDER = "provider"
    PROVIDER_DELEGATE = "provider_delegate"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Role"]:
        # Accept CONSUMER_DELEGATE / Consumer etc. from upstream token claims
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class PersonName(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    # Row values pass through as-is; the statement decides their types
    first_name: Optional[Any] = Field(default=None, alias="firstName")
    last_name: Optional[Any] = Field(default=None, alias="lastName")


class PartyInfo(BaseModel):
    """Identity object attached to a notification as ``consumer`` or ``provider``.

    Every field is optional: a row missing its counterpart columns still
    produces an identity object, with ``None`` in place of the absent values.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    email: Optional[Any] = None
    name: PersonName = Field(default_factory=PersonName)
    id: Optional[str] = None

    @classmethod
    def of(
        cls,
        first_name: Optional[Any],
        last_name: Optional[Any],
        party_id: Optional[Any],
        email: Optional[Any],
    ) -> "PartyInfo":
        return cls(
            email=email,
            name=PersonName(first_name=first_name, last_name=last_name),
            id=str(party_id) if party_id is not None else None,
        )

    def to_json(self) -> Dict[str, Any]:
        """Wire shape: ``{email, name: {firstName, lastName}, id}``."""
        return self.model_dump(mode="json", by_alias=True)


class User(BaseModel):
    """Caller identity as resolved by the authentication layer."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(..., alias="userId", description="UUID of the caller")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email_id: Optional[str] = Field(default=None, alias="emailId")
    resource_server_url: str = Field(..., alias="resourceServerUrl")
    # Unrecognised role strings are kept as-is; classification decides what they mean
    role: Union[Role, str] = Field(..., description="Resolved role of the caller")

    @field_validator("user_id", mode="before")
    @classmethod
    def _validate_user_id(cls, value: Any) -> str:
        if isinstance(value, uuid.UUID):
            return str(value)
        # Only the hyphenated form; the id is returned exactly as sent
        try:
            parsed = uuid.UUID(value)
        except (AttributeError, TypeError, ValueError) as exc:
            raise ValueError(f"user id is not a valid UUID: {value!r}") from exc
        if str(parsed) != value.lower():
            raise ValueError(f"user id is not a valid UUID: {value!r}")
        return value

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return Role(value)
            except ValueError:
                return value
        return value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Build a User from camelCase or snake_case keys."""
        return cls.model_validate(data)

    @property
    def requester_uuid(self) -> uuid.UUID:
        return uuid.UUID(self.user_id)

    def party_info(self) -> PartyInfo:
        return PartyInfo.of(self.first_name, self.last_name, self.user_id, self.email_id)
