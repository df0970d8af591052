"""
Control-plane Emulator Backend.

In-memory emulation of the Cosmos DB MongoDB database control plane:
databases keyed by subscription, resource group, account and name, each
with an optional throughput sub-resource.

Author: Zureform Team
Date: 2026-10-17
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..clients.models import (
    MongoDatabase,
    MongoDatabaseCreateUpdateParameters,
    MongoDatabaseProperties,
    MongoDatabaseResource,
    ThroughputSettings,
    ThroughputSettingsProperties,
    ThroughputSettingsResource,
)
from ..resources.ids import CosmosDatabaseID
from ..schema import validate
from .exceptions import (
    BadRequestError,
    DatabaseNotFoundError,
    OperationNotFoundError,
    ThroughputNotFoundError,
)

DatabaseKey = Tuple[str, str, str, str]

# Finished operations kept for polling; the oldest are dropped first
MAX_OPERATIONS = 1000


@dataclass
class _DatabaseRecord:
    """Stored database and its throughput (None when never provisioned)."""
    resource_id: str
    throughput: Optional[int] = None


@dataclass
class OperationStatus:
    """Status of an asynchronous operation."""
    id: str
    status: str = "Succeeded"
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_arm(self) -> Dict[str, object]:
        body: Dict[str, object] = {"id": self.id, "name": self.id, "status": self.status}
        if self.error_code:
            body["error"] = {"code": self.error_code, "message": self.error_message}
        return body


class EmulatorBackend:
    """Backend for the emulated control plane.

    Thread-safe with async locking for concurrent operations. Accounts are
    implicit: any account name accepts databases.

    Attributes:
        _databases: Databases by (subscription, resource group, account, name)
        _operations: Async operation statuses by id, oldest first
        _lock: Async lock for thread safety
    """

    def __init__(self, max_operations: int = MAX_OPERATIONS) -> None:
        """Initialize emulator backend."""
        self._max_operations = max_operations
        self._databases: Dict[DatabaseKey, _DatabaseRecord] = {}
        self._operations: Dict[str, OperationStatus] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _key(subscription_id: str, resource_group: str, account: str, name: str) -> DatabaseKey:
        # ARM names are case-insensitive
        return (subscription_id.lower(), resource_group.lower(), account.lower(), name.lower())

    @staticmethod
    def _to_model(subscription_id: str, resource_group: str, account: str, name: str, record: _DatabaseRecord) -> MongoDatabase:
        database_id = CosmosDatabaseID(subscription_id, resource_group, account, name)
        return MongoDatabase(
            id=str(database_id),
            name=name,
            properties=MongoDatabaseProperties(resource=MongoDatabaseResource(id=record.resource_id)),
        )

    @staticmethod
    def _validate_throughput(throughput: int) -> None:
        try:
            validate.cosmos_throughput(throughput, "throughput")
        except ValueError as e:
            raise BadRequestError(str(e))

    async def get_database(
        self, subscription_id: str, resource_group: str, account: str, name: str
    ) -> MongoDatabase:
        """Get a database.

        Raises:
            DatabaseNotFoundError: If database not found
        """
        async with self._lock:
            record = self._databases.get(self._key(subscription_id, resource_group, account, name))
            if record is None:
                raise DatabaseNotFoundError(account, name)
            return self._to_model(subscription_id, resource_group, account, name, record)

    async def create_update_database(
        self,
        subscription_id: str,
        resource_group: str,
        account: str,
        name: str,
        parameters: MongoDatabaseCreateUpdateParameters,
    ) -> MongoDatabase:
        """Create or update a database.

        Throughput from ``options`` is only honoured on creation; updates
        leave the throughput sub-resource untouched.

        Raises:
            BadRequestError: If the body does not match the name or throughput is invalid
        """
        if parameters.resource.id != name:
            raise BadRequestError(
                f"Resource id '{parameters.resource.id}' does not match database name '{name}'"
            )
        throughput = parameters.options.throughput
        if throughput is not None:
            self._validate_throughput(throughput)

        async with self._lock:
            key = self._key(subscription_id, resource_group, account, name)
            record = self._databases.get(key)
            if record is None:
                record = _DatabaseRecord(resource_id=name, throughput=throughput)
                self._databases[key] = record
            return self._to_model(subscription_id, resource_group, account, name, record)

    async def delete_database(
        self, subscription_id: str, resource_group: str, account: str, name: str
    ) -> None:
        """Delete a database and its throughput settings.

        Raises:
            DatabaseNotFoundError: If database not found
        """
        async with self._lock:
            key = self._key(subscription_id, resource_group, account, name)
            if key not in self._databases:
                raise DatabaseNotFoundError(account, name)
            del self._databases[key]

    async def get_throughput(
        self, subscription_id: str, resource_group: str, account: str, name: str
    ) -> ThroughputSettings:
        """Get a database's throughput settings.

        Raises:
            DatabaseNotFoundError: If database not found
            ThroughputNotFoundError: If no throughput was provisioned
        """
        async with self._lock:
            record = self._get_record_unlocked(subscription_id, resource_group, account, name)
            return self._throughput_model(subscription_id, resource_group, account, name, record)

    async def update_throughput(
        self, subscription_id: str, resource_group: str, account: str, name: str, throughput: int
    ) -> ThroughputSettings:
        """Update a database's throughput.

        Raises:
            DatabaseNotFoundError: If database not found
            ThroughputNotFoundError: If the database was created without throughput
            BadRequestError: If the throughput value is invalid
        """
        self._validate_throughput(throughput)
        async with self._lock:
            record = self._get_record_unlocked(subscription_id, resource_group, account, name)
            if record.throughput is None:
                raise ThroughputNotFoundError(account, name)
            record.throughput = throughput
            return self._throughput_model(subscription_id, resource_group, account, name, record)

    def _get_record_unlocked(
        self, subscription_id: str, resource_group: str, account: str, name: str
    ) -> _DatabaseRecord:
        record = self._databases.get(self._key(subscription_id, resource_group, account, name))
        if record is None:
            raise DatabaseNotFoundError(account, name)
        return record

    @staticmethod
    def _throughput_model(
        subscription_id: str, resource_group: str, account: str, name: str, record: _DatabaseRecord
    ) -> ThroughputSettings:
        if record.throughput is None:
            raise ThroughputNotFoundError(account, name)
        database_id = CosmosDatabaseID(subscription_id, resource_group, account, name)
        return ThroughputSettings(
            id=f"{database_id}/throughputSettings/default",
            properties=ThroughputSettingsProperties(
                resource=ThroughputSettingsResource(throughput=record.throughput)
            ),
        )

    async def record_operation(
        self, error_code: Optional[str] = None, error_message: Optional[str] = None
    ) -> OperationStatus:
        """Record a finished asynchronous operation and return its status."""
        async with self._lock:
            operation = OperationStatus(
                id=uuid.uuid4().hex,
                status="Failed" if error_code else "Succeeded",
                error_code=error_code,
                error_message=error_message,
            )
            self._operations[operation.id] = operation
            while len(self._operations) > self._max_operations:
                del self._operations[next(iter(self._operations))]
            return operation

    async def get_operation(self, operation_id: str) -> OperationStatus:
        """Get an asynchronous operation's status.

        Raises:
            OperationNotFoundError: If the operation id is unknown
        """
        async with self._lock:
            if operation_id not in self._operations:
                raise OperationNotFoundError(operation_id)
            return self._operations[operation_id]

    async def reset(self) -> None:
        """Remove all databases and operations."""
        async with self._lock:
            self._databases.clear()
            self._operations.clear()
