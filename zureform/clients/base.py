"""
Abstract MongoDB database client.

Defines the control-plane calls the resource adapter depends on. Every
call is keyed by (resource group, account, database). Failures are raised
as ``RemoteAPIError`` carrying the HTTP status code.

Author: Zureform Team
Date: 2026-10-17
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import MongoDatabase, MongoDatabaseCreateUpdateParameters, ThroughputSettings


class LongRunningOperation(ABC):
    """Handle to an asynchronous control-plane operation."""

    @abstractmethod
    async def result(self) -> Any:
        """
        Wait for the operation to finish.

        Returns:
            The operation's final resource, if it has one

        Raises:
            RemoteAPIError: If the operation failed
        """
        pass


class CompletedOperation(LongRunningOperation):
    """Operation that had already finished when it was started."""

    def __init__(self, value: Any = None):
        self._value = value

    async def result(self) -> Any:
        return self._value


class MongoDatabaseClient(ABC):
    """Control-plane client for MongoDB databases and their throughput."""

    @abstractmethod
    async def get_database(
        self, resource_group: str, account: str, name: str
    ) -> MongoDatabase:
        """
        Fetch a database.

        Raises:
            RemoteAPIError: 404 if the database does not exist
        """
        pass

    @abstractmethod
    async def begin_create_update_database(
        self,
        resource_group: str,
        account: str,
        name: str,
        parameters: MongoDatabaseCreateUpdateParameters,
    ) -> LongRunningOperation:
        """Start an idempotent create-or-update of a database."""
        pass

    @abstractmethod
    async def begin_delete_database(
        self, resource_group: str, account: str, name: str
    ) -> LongRunningOperation:
        """
        Start deleting a database.

        Raises:
            RemoteAPIError: 404 if the database does not exist
        """
        pass

    @abstractmethod
    async def get_database_throughput(
        self, resource_group: str, account: str, name: str
    ) -> ThroughputSettings:
        """
        Fetch the throughput settings of a database.

        Raises:
            RemoteAPIError: 404 if the database has no throughput configured
        """
        pass

    @abstractmethod
    async def begin_update_database_throughput(
        self, resource_group: str, account: str, name: str, throughput: int
    ) -> LongRunningOperation:
        """
        Start updating a database's throughput.

        Raises:
            RemoteAPIError: 404 if the database has no throughput sub-resource
        """
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass

    async def __aenter__(self) -> "MongoDatabaseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
