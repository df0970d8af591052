"""
Cosmos DB resource identifiers.

ARM identifiers are alternating ``key/value`` path segments:

    /subscriptions/{sub}/resourceGroups/{rg}/providers/Microsoft.DocumentDB
        /databaseAccounts/{account}/mongodbDatabases/{database}

Older API versions addressed the same database as
``.../databaseAccounts/{account}/apis/mongodb/databases/{database}``.

Author: Zureform Team
Date: 2026-10-17
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exceptions import IDParseError

PROVIDER_NAMESPACE = "Microsoft.DocumentDB"


@dataclass(frozen=True)
class CosmosDatabaseID:
    """Composite key of a Cosmos DB MongoDB database."""

    subscription_id: str
    resource_group: str
    account: str
    database: str

    def __str__(self) -> str:
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group}"
            f"/providers/{PROVIDER_NAMESPACE}"
            f"/databaseAccounts/{self.account}"
            f"/mongodbDatabases/{self.database}"
        )


def _parse_path(resource_id: str) -> Dict[str, str]:
    """Split an ARM id into its key/value segments (keys are case-insensitive)."""
    if not resource_id:
        raise IDParseError(resource_id, "ID was empty")
    if not resource_id.startswith("/"):
        raise IDParseError(resource_id, "ID must start with '/'")

    segments = resource_id.strip("/").split("/")
    if len(segments) % 2 != 0:
        raise IDParseError(resource_id, "the number of path segments is not divisible by 2")

    path: Dict[str, str] = {}
    for i in range(0, len(segments), 2):
        key, value = segments[i], segments[i + 1]
        if not key or not value:
            raise IDParseError(resource_id, f"key/value pair {key!r}/{value!r} is empty")
        path[key.lower()] = value
    return path


def parse_cosmos_database_id(resource_id: str) -> CosmosDatabaseID:
    """
    Parse a stored identifier into its composite key.

    Raises:
        IDParseError: If the id is malformed or misses a component
    """
    path = _parse_path(resource_id)

    def pop(key: str, label: str) -> str:
        value = path.get(key.lower())
        if not value:
            raise IDParseError(resource_id, f"no {label} found")
        return value

    subscription = pop("subscriptions", "subscription ID")
    resource_group = pop("resourceGroups", "resource group name")
    account = pop("databaseAccounts", "databaseAccounts")
    database = path.get("mongodbdatabases") or path.get("databases")
    if not database:
        raise IDParseError(resource_id, "no mongodbDatabases found")

    return CosmosDatabaseID(
        subscription_id=subscription,
        resource_group=resource_group,
        account=account,
        database=database,
    )


def cosmos_id_from_response(response: Any) -> str:
    """
    Derive the canonical identifier from a get-database response.

    Raises:
        IDParseError: If the response carries no usable id
    """
    resource_id: Optional[str] = getattr(response, "id", None)
    if not resource_id:
        raise IDParseError("", "response did not include an ID")
    # Normalise the legacy form so state always holds one shape
    return str(parse_cosmos_database_id(resource_id))
