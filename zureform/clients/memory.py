"""
In-process client backed by the emulator backend.

Used for local runs without network access and throughout the test suite.
"""

from typing import Any, Awaitable, Optional, TypeVar

from ..emulator.backend import EmulatorBackend
from ..emulator.exceptions import EmulatorError
from ..exceptions import RemoteAPIError
from .base import CompletedOperation, LongRunningOperation, MongoDatabaseClient
from .models import MongoDatabase, MongoDatabaseCreateUpdateParameters, ThroughputSettings

T = TypeVar("T")

DEFAULT_SUBSCRIPTION = "00000000-0000-0000-0000-000000000000"


async def _translate(call: Awaitable[T]) -> T:
    try:
        return await call
    except EmulatorError as e:
        raise RemoteAPIError(e.message, status_code=e.status_code, error_code=e.error_code) from e


class InMemoryMongoDatabaseClient(MongoDatabaseClient):
    """Client that calls an ``EmulatorBackend`` directly."""

    def __init__(self, backend: Optional[EmulatorBackend] = None, subscription_id: Optional[str] = None):
        self.backend = backend or EmulatorBackend()
        self.subscription_id = subscription_id or DEFAULT_SUBSCRIPTION

    async def get_database(self, resource_group: str, account: str, name: str) -> MongoDatabase:
        return await _translate(
            self.backend.get_database(self.subscription_id, resource_group, account, name)
        )

    async def begin_create_update_database(
        self,
        resource_group: str,
        account: str,
        name: str,
        parameters: MongoDatabaseCreateUpdateParameters,
    ) -> LongRunningOperation:
        result = await _translate(
            self.backend.create_update_database(self.subscription_id, resource_group, account, name, parameters)
        )
        return CompletedOperation(result)

    async def begin_delete_database(self, resource_group: str, account: str, name: str) -> LongRunningOperation:
        await _translate(
            self.backend.delete_database(self.subscription_id, resource_group, account, name)
        )
        return CompletedOperation()

    async def get_database_throughput(self, resource_group: str, account: str, name: str) -> ThroughputSettings:
        return await _translate(
            self.backend.get_throughput(self.subscription_id, resource_group, account, name)
        )

    async def begin_update_database_throughput(
        self, resource_group: str, account: str, name: str, throughput: int
    ) -> LongRunningOperation:
        result: Any = await _translate(
            self.backend.update_throughput(self.subscription_id, resource_group, account, name, throughput)
        )
        return CompletedOperation(result)
