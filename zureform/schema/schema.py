"""
Schema descriptors for resource attributes.

Describes the shape of each attribute a resource accepts, whether it is
user-supplied or computed, and whether changing it forces the resource to
be replaced.

Author: Zureform Team
Date: 2026-10-17
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from ..core.timeouts import ResourceTimeouts
from ..exceptions import ConfigValidationError

# Validators raise ValueError describing what is wrong with ``value``.
ValidateFunc = Callable[[Any, str], None]
LifecycleFunc = Callable[[Any, Any], Awaitable[Any]]

TIMEOUTS_KEY = "timeouts"


class ValueType(str, Enum):
    """Attribute value types."""
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    MAP = "map"


_PYTHON_TYPES = {
    ValueType.STRING: (str,),
    ValueType.INT: (int,),
    ValueType.BOOL: (bool,),
    ValueType.MAP: (dict,),
}


@dataclass(frozen=True)
class Schema:
    """Shape and behaviour of a single attribute.

    Attributes:
        type: Value type
        required: Must be present in configuration
        optional: May be present in configuration
        computed: Value may be filled in from remote state
        force_new: Changing the value requires replacing the resource
        default: Value assumed when configuration omits the attribute
        validate_func: Optional validation hook
    """

    type: ValueType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    validate_func: Optional[ValidateFunc] = None

    def check(self, key: str, value: Any) -> List[str]:
        """Return validation errors for ``value`` (empty when valid)."""
        expected = _PYTHON_TYPES[self.type]
        # bool is a subclass of int
        if not isinstance(value, expected) or (self.type == ValueType.INT and isinstance(value, bool)):
            return [f"{key}: expected {self.type.value}, got {type(value).__name__}"]
        if self.validate_func is not None:
            try:
                self.validate_func(value, key)
            except ValueError as e:
                return [str(e)]
        return []


@dataclass
class Diff:
    """Difference between prior state and desired configuration."""

    changes: Dict[str, Tuple[Any, Any]] = field(default_factory=dict)
    requires_replace: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.changes


@dataclass
class Resource:
    """A managed resource type: its schema, lifecycle functions and timeouts."""

    schema: Dict[str, Schema]
    create: LifecycleFunc
    read: LifecycleFunc
    update: LifecycleFunc
    delete: LifecycleFunc
    importable: bool = True
    timeouts: ResourceTimeouts = field(default_factory=ResourceTimeouts)

    def validate(self, config: Mapping[str, Any]) -> None:
        """
        Validate a configuration block against the schema.

        Raises:
            ConfigValidationError: Listing every problem found
        """
        errors: List[str] = []

        for key in config:
            if key != TIMEOUTS_KEY and key not in self.schema:
                errors.append(f"{key}: unsupported argument")

        if TIMEOUTS_KEY in config:
            try:
                self.timeouts.with_overrides(config[TIMEOUTS_KEY])
            except (ValueError, AttributeError) as e:
                errors.append(f"{TIMEOUTS_KEY}: {e}")

        for key, attr in self.schema.items():
            value = config.get(key)
            if value is None:
                if attr.required:
                    errors.append(f"{key}: required field is not set")
                continue
            if not (attr.required or attr.optional):
                errors.append(f"{key}: computed attribute cannot be set")
                continue
            errors.extend(attr.check(key, value))

        if errors:
            raise ConfigValidationError(errors)

    def diff(self, prior_state: Optional[Mapping[str, Any]], config: Mapping[str, Any]) -> Diff:
        """
        Compare prior state with desired configuration.

        Computed attributes left out of the configuration keep their remote
        value and do not count as changes.
        """
        prior = prior_state or {}
        result = Diff()
        for key, attr in self.schema.items():
            desired = config.get(key, attr.default)
            current = prior.get(key)
            if desired is None and attr.computed:
                continue
            if desired != current:
                result.changes[key] = (current, desired)
                if attr.force_new and prior_state:
                    result.requires_replace.append(key)
        return result
