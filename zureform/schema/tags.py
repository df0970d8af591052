"""
Tags attribute helpers.

Schema descriptors for a resource's ``tags`` map in its three usage
contexts, plus validation and conversion of tag values.
"""

from typing import Any, Dict, Mapping, Optional

from .schema import Schema, ValueType

MAX_TAGS = 50
MAX_KEY_LENGTH = 512
MAX_VALUE_LENGTH = 256


def data_source_schema() -> Schema:
    """Schema for tags on a data source (read-only, filled from remote)."""
    return Schema(
        type=ValueType.MAP,
        computed=True,
    )


def force_new_schema() -> Schema:
    """Schema for tags when changes require recreating the resource."""
    return Schema(
        type=ValueType.MAP,
        optional=True,
        computed=True,
        force_new=True,
        validate_func=validate,
    )


def schema() -> Schema:
    """Schema for tags that can be changed in place."""
    return Schema(
        type=ValueType.MAP,
        optional=True,
        computed=True,
        validate_func=validate,
    )


def tag_value_to_string(value: Any) -> str:
    """
    Convert a tag value to its string form.

    Raises:
        ValueError: For values that are not strings or numbers
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"unknown tag type {type(value).__name__} in tag value")
    return str(value)


def validate(value: Any, key: str) -> None:
    """Validate a tags map."""
    if not isinstance(value, Mapping):
        raise ValueError(f"{key} must be a map")

    problems = []
    if len(value) > MAX_TAGS:
        problems.append(f"a maximum of {MAX_TAGS} tags can be applied to each ARM resource")

    for tag_key, tag_value in value.items():
        if len(tag_key) > MAX_KEY_LENGTH:
            problems.append(
                f"the maximum length for a tag key is {MAX_KEY_LENGTH} characters: "
                f"{tag_key!r} is {len(tag_key)} characters"
            )
        try:
            text = tag_value_to_string(tag_value)
        except ValueError as e:
            problems.append(str(e))
            continue
        if len(text) > MAX_VALUE_LENGTH:
            problems.append(
                f"the maximum length for a tag value is {MAX_VALUE_LENGTH} characters: "
                f"the value for {tag_key!r} is {len(text)} characters"
            )

    if problems:
        raise ValueError("; ".join(problems))


def expand(tags: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Convert configured tags into the string map sent to the API."""
    return {k: tag_value_to_string(v) for k, v in (tags or {}).items()}


def flatten(tags: Optional[Mapping[str, Optional[str]]]) -> Dict[str, str]:
    """Convert tags returned by the API into state, dropping null values."""
    return {k: v for k, v in (tags or {}).items() if v is not None}
