"""
Attribute validators.

Each validator takes ``(value, key)`` and raises ValueError when the value
is unacceptable.
"""

import re
from typing import Any

from .schema import Schema, ValueType

COSMOS_ACCOUNT_NAME_PATTERN = re.compile(r'^[-a-z0-9]{3,50}$')
COSMOS_ENTITY_FORBIDDEN = set('/\\#?')
RESOURCE_GROUP_NAME_PATTERN = re.compile(r'^[-\w\._\(\)]+$')

MIN_THROUGHPUT = 400
THROUGHPUT_INCREMENT = 100


def cosmos_account_name(value: Any, key: str) -> None:
    """Validate a Cosmos DB account name."""
    if not isinstance(value, str) or not COSMOS_ACCOUNT_NAME_PATTERN.match(value):
        raise ValueError(
            f"{key} name must be 3 - 50 characters long, contain only lowercase "
            f"letters, numbers and hyphens."
        )


def cosmos_entity_name(value: Any, key: str) -> None:
    """Validate a Cosmos DB database, collection or container name."""
    if not isinstance(value, str) or not 1 <= len(value) <= 255:
        raise ValueError(f"{key!r} must be between 1 and 255 characters: {value!r}")
    if COSMOS_ENTITY_FORBIDDEN.intersection(value):
        raise ValueError(f"{key!r} cannot contain the characters /\\#?: {value!r}")


def cosmos_throughput(value: Any, key: str) -> None:
    """Validate a provisioned throughput value."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    if value < MIN_THROUGHPUT:
        raise ValueError(f"{key} must be a minimum of {MIN_THROUGHPUT}")
    if value % THROUGHPUT_INCREMENT != 0:
        raise ValueError(f"{key!r} must be set in increments of {THROUGHPUT_INCREMENT}")


def resource_group_name(value: Any, key: str) -> None:
    """Validate an Azure resource group name."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"{key} cannot be blank")
    if len(value) > 90:
        raise ValueError(f"{key} may not exceed 90 characters in length")
    if value.endswith("."):
        raise ValueError(f"{key} cannot end with a period")
    if not RESOURCE_GROUP_NAME_PATTERN.match(value):
        raise ValueError(
            f"{key} can only contain alphanumeric characters, periods, "
            f"underscores, hyphens and parenthesis"
        )


def schema_resource_group_name() -> Schema:
    """Schema for the ``resource_group_name`` attribute of resources."""
    return Schema(
        type=ValueType.STRING,
        required=True,
        force_new=True,
        validate_func=resource_group_name,
    )
