"""Turn raw notification rows into records carrying consumer and provider identities.

Rows are never modified: each record is a new dict built from the row, with the
raw counterpart columns and the unused join column left out.
"""

from typing import Any, Dict, Iterable, List, Mapping, NamedTuple

from apdacl.notifications.perspective import Perspective
from apdacl.users.models import PartyInfo

RS_SERVER_URL = "resourceServerURL"


class CounterpartColumns(NamedTuple):
    first_name: str
    last_name: str
    party_id: str
    email: str
    join_key: str

    def dropped(self) -> frozenset:
        return frozenset(self)


# Consumer callers get the owner (provider) from the row, and the other way round
OWNER_COLUMNS = CounterpartColumns(
    first_name="ownerFirstName",
    last_name="ownerLastName",
    party_id="ownerId",
    email="ownerEmailId",
    join_key="consumerId",
)
CONSUMER_COLUMNS = CounterpartColumns(
    first_name="consumerFirstName",
    last_name="consumerLastName",
    party_id="consumerId",
    email="consumerEmailId",
    join_key="ownerId",
)


def counterpart_columns(perspective: Perspective) -> CounterpartColumns:
    if perspective is Perspective.CONSUMER:
        return OWNER_COLUMNS
    return CONSUMER_COLUMNS


def extract_counterpart(row: Mapping[str, Any], perspective: Perspective) -> PartyInfo:
    """Read the counterpart identity out of a row; absent columns become None."""
    columns = counterpart_columns(perspective)
    return PartyInfo.of(
        row.get(columns.first_name),
        row.get(columns.last_name),
        row.get(columns.party_id),
        row.get(columns.email),
    )


def strip_counterpart_columns(row: Mapping[str, Any], perspective: Perspective) -> Dict[str, Any]:
    dropped = counterpart_columns(perspective).dropped()
    return {key: value for key, value in row.items() if key not in dropped}


def assemble_record(
    row: Mapping[str, Any],
    caller: PartyInfo,
    perspective: Perspective,
    resource_server_url: str,
) -> Dict[str, Any]:
    """
    Build one outgoing record.

    Args:
        row: Raw row as returned by the notification statement
        caller: Identity of the requesting user
        perspective: Side the caller is on
        resource_server_url: Resource server the lookup was scoped to

    Returns:
        All non-identity columns of the row plus ``resourceServerURL``,
        ``consumer`` and ``provider``
    """
    counterpart = extract_counterpart(row, perspective)
    record = strip_counterpart_columns(row, perspective)
    record[RS_SERVER_URL] = resource_server_url
    record[perspective.value] = caller.to_json()
    record[perspective.opposite.value] = counterpart.to_json()
    return record


def assemble_records(
    rows: Iterable[Mapping[str, Any]],
    caller: PartyInfo,
    perspective: Perspective,
    resource_server_url: str,
) -> List[Dict[str, Any]]:
    return [assemble_record(row, caller, perspective, resource_server_url) for row in rows]
