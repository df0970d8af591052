"""
Resource data: the configuration and state record a lifecycle call works on.
"""

import copy
from typing import Any, Dict, Mapping, Optional

from ..core.timeouts import ResourceTimeouts, TimeoutKind
from ..schema.schema import TIMEOUTS_KEY, Schema

ID_KEY = "id"


class ResourceData:
    """
    Desired configuration merged over prior state.

    Lifecycle functions read attributes with ``get``, write remote values
    back with ``set`` and record the identifier with ``set_id``. An empty
    id means the resource does not exist.
    """

    def __init__(
        self,
        schema: Dict[str, Schema],
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[Mapping[str, Any]] = None,
        timeouts: Optional[ResourceTimeouts] = None,
    ):
        self._schema = schema
        self._values: Dict[str, Any] = {}
        self._id = ""

        if state:
            self._id = state.get(ID_KEY) or ""
            for key in schema:
                if key in state:
                    self._values[key] = copy.deepcopy(state[key])
        self._is_new = not self._id

        overrides = None
        if config:
            for key, attr in schema.items():
                if key in config and config[key] is not None:
                    self._values[key] = copy.deepcopy(config[key])
                elif not attr.computed and key in self._values:
                    # Removed from configuration
                    self._values[key] = attr.default
            overrides = config.get(TIMEOUTS_KEY)

        self._timeouts = (timeouts or ResourceTimeouts()).with_overrides(overrides)

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, resource_id: str) -> None:
        self._id = resource_id or ""

    def is_new_resource(self) -> bool:
        """True while the resource is being created for the first time."""
        return self._is_new

    def get(self, key: str) -> Any:
        if key not in self._schema:
            raise KeyError(f"Invalid attribute {key!r}")
        value = self._values.get(key)
        if value is None:
            return self._schema[key].default
        return value

    def set(self, key: str, value: Any) -> None:
        if key not in self._schema:
            raise KeyError(f"Invalid attribute {key!r}")
        self._values[key] = value

    def timeout(self, kind: TimeoutKind) -> float:
        return self._timeouts.get(kind)

    def state(self) -> Optional[Dict[str, Any]]:
        """The state record, or None when the resource does not exist."""
        if not self._id:
            return None
        record: Dict[str, Any] = {ID_KEY: self._id}
        for key in self._schema:
            record[key] = copy.deepcopy(self._values.get(key))
        return record
