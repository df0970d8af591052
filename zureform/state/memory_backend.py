"""
In-Memory State Backend Implementation.

Keeps state records in dictionaries. Ideal for tests and one-shot runs
where persistence isn't required.

Author: Zureform Team
Date: 2026-10-17
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

from .backend import StateBackend
from .exceptions import SerializationError


def serialize(value: Any) -> Any:
    """
    Round-trip a value through JSON.

    Ensures values behave the same in every backend.

    Raises:
        SerializationError: If the value is not JSON-serializable
    """
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot serialize value: {e}")


class InMemoryBackend(StateBackend):
    """
    In-memory state backend using nested dictionaries.

    Storage structure:
        {namespace: {key: value}}

    Limitations:
    - Data lost on process restart
    """

    def __init__(self):
        """Initialize in-memory storage."""
        self._storage: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get(
        self, namespace: str, key: str, default: Optional[Any] = None
    ) -> Optional[Any]:
        """Retrieve a value from the backend."""
        async with self._lock:
            if key not in self._storage.get(namespace, {}):
                return default
            return serialize(self._storage[namespace][key])

    async def set(self, namespace: str, key: str, value: Any) -> None:
        """Store a value in the backend."""
        serialized_value = serialize(value)
        async with self._lock:
            self._storage.setdefault(namespace, {})[key] = serialized_value

    async def delete(self, namespace: str, key: str) -> bool:
        """Delete a key from the backend."""
        async with self._lock:
            if key not in self._storage.get(namespace, {}):
                return False
            del self._storage[namespace][key]
            return True

    async def list(self, namespace: str) -> List[str]:
        """List all keys in a namespace."""
        async with self._lock:
            return sorted(self._storage.get(namespace, {}))
