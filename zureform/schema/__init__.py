"""Schema module initialization."""

from .schema import Schema, ValueType, Resource, Diff, TIMEOUTS_KEY
from . import tags
from . import validate

__all__ = [
    "Schema",
    "ValueType",
    "Resource",
    "Diff",
    "TIMEOUTS_KEY",
    "tags",
    "validate",
]
