"""
Abstract State Backend Interface.

Defines the contract that local state stores fulfil. The host keeps one
state record per managed resource, keyed by resource address within a
namespace (the resource type).

Author: Zureform Team
Date: 2026-10-17
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class StateBackend(ABC):
    """
    Abstract base class for state persistence backends.

    Supports:
    - Basic key-value operations (get, set, delete, list)
    - Namespacing per resource type
    """

    @abstractmethod
    async def get(
        self, namespace: str, key: str, default: Optional[Any] = None
    ) -> Optional[Any]:
        """
        Retrieve a value from the backend.

        Args:
            namespace: Namespace for isolation (e.g., "cosmosdb_mongo_database")
            key: Unique key within namespace
            default: Value to return if key doesn't exist

        Returns:
            The stored value or default if not found

        Raises:
            StateBackendError: If retrieval operation fails
        """
        pass

    @abstractmethod
    async def set(self, namespace: str, key: str, value: Any) -> None:
        """
        Store a value in the backend.

        Args:
            namespace: Namespace for isolation
            key: Unique key within namespace
            value: Value to store (must be JSON-serializable)

        Raises:
            StateBackendError: If storage operation fails
            SerializationError: If value cannot be serialized
        """
        pass

    @abstractmethod
    async def delete(self, namespace: str, key: str) -> bool:
        """
        Delete a key from the backend.

        Returns:
            True if key was deleted, False if key didn't exist
        """
        pass

    @abstractmethod
    async def list(self, namespace: str) -> List[str]:
        """List all keys in a namespace."""
        pass

    async def exists(self, namespace: str, key: str) -> bool:
        """Check if a key exists in the backend."""
        return key in await self.list(namespace)
