"""
Azure SDK client.

Wraps ``azure.mgmt.cosmosdb.aio.CosmosDBManagementClient`` MongoDB
operations behind ``MongoDatabaseClient``, translating SDK errors into
``RemoteAPIError`` and SDK models into ours.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from azure.core.exceptions import AzureError, HttpResponseError
from azure.mgmt.cosmosdb.aio import CosmosDBManagementClient
from azure.mgmt.cosmosdb.models import (
    CreateUpdateOptions,
    MongoDBDatabaseCreateUpdateParameters,
    MongoDBDatabaseResource,
    ThroughputSettingsResource,
    ThroughputSettingsUpdateParameters,
)

from ..core.config_manager import DEFAULT_ENDPOINT
from ..exceptions import RemoteAPIError
from .base import LongRunningOperation, MongoDatabaseClient
from .models import (
    MONGO_DATABASE_TYPE,
    THROUGHPUT_SETTINGS_TYPE,
    MongoDatabase,
    MongoDatabaseCreateUpdateParameters,
    MongoDatabaseProperties,
    MongoDatabaseResource,
    ThroughputSettings,
    ThroughputSettingsProperties,
    ThroughputSettingsResource as ThroughputResourceModel,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_remote_error(error: AzureError) -> RemoteAPIError:
    if isinstance(error, HttpResponseError):
        code = getattr(getattr(error, "error", None), "code", None) or "InternalServerError"
        return RemoteAPIError(error.message, status_code=error.status_code, error_code=code)
    return RemoteAPIError(str(error), error_code="ServiceRequestError")


async def _call(awaitable: Awaitable[T]) -> T:
    try:
        return await awaitable
    except AzureError as e:
        raise _to_remote_error(e) from e


def _database_from_sdk(result: Any) -> MongoDatabase:
    resource = getattr(result, "resource", None)
    properties = None
    if resource is not None and getattr(resource, "id", None):
        properties = MongoDatabaseProperties(resource=MongoDatabaseResource(id=resource.id))
    return MongoDatabase(
        id=result.id,
        name=result.name,
        type=result.type or MONGO_DATABASE_TYPE,
        properties=properties,
    )


def _throughput_from_sdk(result: Any) -> ThroughputSettings:
    resource = getattr(result, "resource", None)
    properties = None
    if resource is not None:
        properties = ThroughputSettingsProperties(
            resource=ThroughputResourceModel(throughput=resource.throughput)
        )
    return ThroughputSettings(
        id=result.id,
        name=result.name or "default",
        type=result.type or THROUGHPUT_SETTINGS_TYPE,
        properties=properties,
    )


class ArmOperation(LongRunningOperation):
    """Wraps an ``AsyncLROPoller``."""

    def __init__(self, poller: Any, transform: Optional[Callable[[Any], Any]] = None):
        self._poller = poller
        self._transform = transform

    async def result(self) -> Any:
        value = await _call(self._poller.result())
        if value is not None and self._transform is not None:
            return self._transform(value)
        return value


class ArmMongoDatabaseClient(MongoDatabaseClient):
    """Client for the Azure Resource Manager Cosmos DB API.

    Args:
        credential: Async azure-identity credential
        subscription_id: Subscription holding the accounts
        endpoint: ARM endpoint
        close_credential: Close the credential together with the client
    """

    def __init__(
        self,
        credential: Any,
        subscription_id: str,
        endpoint: str = DEFAULT_ENDPOINT,
        close_credential: bool = False,
        management_client: Optional[Any] = None,
    ):
        self._credential = credential
        self._close_credential = close_credential
        self._client = management_client or CosmosDBManagementClient(
            credential, subscription_id, base_url=endpoint
        )
        self._ops = self._client.mongo_db_resources

    async def get_database(self, resource_group: str, account: str, name: str) -> MongoDatabase:
        result = await _call(self._ops.get_mongo_db_database(resource_group, account, name))
        return _database_from_sdk(result)

    async def begin_create_update_database(
        self,
        resource_group: str,
        account: str,
        name: str,
        parameters: MongoDatabaseCreateUpdateParameters,
    ) -> LongRunningOperation:
        sdk_parameters = MongoDBDatabaseCreateUpdateParameters(
            resource=MongoDBDatabaseResource(id=parameters.resource.id),
            options=CreateUpdateOptions(throughput=parameters.options.throughput),
        )
        logger.debug(f"Starting create/update of MongoDB database {name} (account {account})")
        poller = await _call(
            self._ops.begin_create_update_mongo_db_database(resource_group, account, name, sdk_parameters)
        )
        return ArmOperation(poller, _database_from_sdk)

    async def begin_delete_database(self, resource_group: str, account: str, name: str) -> LongRunningOperation:
        logger.debug(f"Starting delete of MongoDB database {name} (account {account})")
        poller = await _call(self._ops.begin_delete_mongo_db_database(resource_group, account, name))
        return ArmOperation(poller)

    async def get_database_throughput(self, resource_group: str, account: str, name: str) -> ThroughputSettings:
        result = await _call(self._ops.get_mongo_db_database_throughput(resource_group, account, name))
        return _throughput_from_sdk(result)

    async def begin_update_database_throughput(
        self, resource_group: str, account: str, name: str, throughput: int
    ) -> LongRunningOperation:
        sdk_parameters = ThroughputSettingsUpdateParameters(
            resource=ThroughputSettingsResource(throughput=throughput)
        )
        poller = await _call(
            self._ops.begin_update_mongo_db_database_throughput(resource_group, account, name, sdk_parameters)
        )
        return ArmOperation(poller, _throughput_from_sdk)

    async def close(self) -> None:
        await self._client.close()
        if self._close_credential:
            await self._credential.close()
