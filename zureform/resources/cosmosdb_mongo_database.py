"""
Cosmos DB MongoDB database resource.

Lifecycle functions for ``cosmosdb_mongo_database``. Each takes the
resource data and the provider (``meta``), which supplies the
control-plane client, feature toggles and the host's stop signal.
"""

import logging

from ..clients.models import (
    CreateUpdateOptions,
    MongoDatabaseCreateUpdateParameters,
    MongoDatabaseResource,
)
from ..core.timeouts import TimeoutKind, with_timeout
from ..exceptions import (
    IDParseError,
    ImportAsExistsError,
    RemoteAPIError,
    ResourceOperationError,
    ThroughputNotConfigurableError,
)
from ..response import was_not_found
from ..schema.schema import Resource, Schema, ValueType
from ..schema import validate
from .data import ResourceData
from .ids import cosmos_id_from_response, parse_cosmos_database_id

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "cosmosdb_mongo_database"


def resource_cosmosdb_mongo_database() -> Resource:
    """Definition of the MongoDB database resource."""
    return Resource(
        schema={
            "name": Schema(
                type=ValueType.STRING,
                required=True,
                force_new=True,
                validate_func=validate.cosmos_entity_name,
            ),
            "resource_group_name": validate.schema_resource_group_name(),
            "account_name": Schema(
                type=ValueType.STRING,
                required=True,
                force_new=True,
                validate_func=validate.cosmos_account_name,
            ),
            "throughput": Schema(
                type=ValueType.INT,
                optional=True,
                default=None,
                validate_func=validate.cosmos_throughput,
            ),
        },
        create=create_update,
        read=read,
        update=create_update,
        delete=delete,
        importable=True,
    )


@with_timeout()
async def create_update(d: ResourceData, meta) -> None:
    client = meta.client

    name = d.get("name")
    resource_group = d.get("resource_group_name")
    account = d.get("account_name")
    throughput = d.get("throughput")
    has_throughput = bool(throughput and throughput > 0)

    options = CreateUpdateOptions()

    if d.is_new_resource():
        if meta.features.resources_should_be_imported:
            try:
                existing = await client.get_database(resource_group, account, name)
            except RemoteAPIError as e:
                if not was_not_found(e):
                    raise ResourceOperationError(
                        f"Error checking for presence of creating Cosmos Mongo Database {name} (Account {account})",
                        e,
                    ) from e
            else:
                try:
                    existing_id = cosmos_id_from_response(existing)
                except IDParseError as e:
                    raise ResourceOperationError(
                        f"Error generating import ID for Cosmos Mongo Database {name!r} (Account {account})",
                        e,
                    ) from e
                raise ImportAsExistsError(RESOURCE_TYPE, existing_id)

        if has_throughput:
            options.throughput = throughput

    parameters = MongoDatabaseCreateUpdateParameters(
        resource=MongoDatabaseResource(id=name),
        options=options,
    )

    try:
        operation = await client.begin_create_update_database(resource_group, account, name, parameters)
    except RemoteAPIError as e:
        raise ResourceOperationError(
            f"Error issuing create/update request for Cosmos Mongo Database {name} (Account {account})", e
        ) from e

    try:
        await operation.result()
    except RemoteAPIError as e:
        raise ResourceOperationError(
            f"Error waiting on create/update future for Cosmos Mongo Database {name} (Account {account})", e
        ) from e

    if has_throughput and not d.is_new_resource():
        await _update_throughput(d, meta, resource_group, account, name, throughput)

    try:
        resp = await client.get_database(resource_group, account, name)
    except RemoteAPIError as e:
        raise ResourceOperationError(
            f"Error making get request for Cosmos Mongo Database {name} (Account {account})", e
        ) from e

    try:
        d.set_id(cosmos_id_from_response(resp))
    except IDParseError as e:
        raise ResourceOperationError(
            f"Error retrieving the ID for Cosmos Mongo Database {name!r} (Account {account})", e
        ) from e

    await read(d, meta)


async def _update_throughput(d: ResourceData, meta, resource_group: str, account: str, name: str, throughput: int) -> None:
    """Update throughput on an existing database.

    Local throughput is cleared on failure, and the error is still raised.
    """
    message = f"Error setting Throughput for Cosmos MongoDB Database {name} (Account {account})"
    try:
        operation = await meta.client.begin_update_database_throughput(resource_group, account, name, throughput)
    except RemoteAPIError as e:
        d.set("throughput", None)
        if was_not_found(e):
            raise ThroughputNotConfigurableError(message, e) from e
        raise ResourceOperationError(message, e) from e

    try:
        await operation.result()
    except RemoteAPIError as e:
        d.set("throughput", None)
        if was_not_found(e):
            raise ThroughputNotConfigurableError(message, e) from e
        raise ResourceOperationError(
            f"Error waiting on ThroughputUpdate future for Cosmos Mongo Database {name} (Account {account})", e
        ) from e


@with_timeout(TimeoutKind.READ)
async def read(d: ResourceData, meta) -> None:
    client = meta.client

    database_id = parse_cosmos_database_id(d.id)

    try:
        resp = await client.get_database(database_id.resource_group, database_id.account, database_id.database)
    except RemoteAPIError as e:
        if was_not_found(e):
            logger.info(f"Error reading Cosmos Mongo Database {database_id.database} (Account {database_id.account}) - removing from state")
            d.set_id("")
            return
        raise ResourceOperationError(
            f"Error reading Cosmos Mongo Database {database_id.database} (Account {database_id.account})", e
        ) from e

    d.set("resource_group_name", database_id.resource_group)
    d.set("account_name", database_id.account)
    if resp.resource_id:
        d.set("name", resp.resource_id)

    try:
        throughput_resp = await client.get_database_throughput(database_id.resource_group, database_id.account, database_id.database)
    except RemoteAPIError as e:
        if not was_not_found(e):
            d.set("throughput", None)
            raise ResourceOperationError(
                f"Error reading Throughput on Cosmos Mongo Database {database_id.database} (Account {database_id.account})", e
            ) from e
    else:
        if throughput_resp.throughput is not None:
            d.set("throughput", throughput_resp.throughput)


@with_timeout(TimeoutKind.DELETE)
async def delete(d: ResourceData, meta) -> None:
    client = meta.client

    database_id = parse_cosmos_database_id(d.id)

    try:
        operation = await client.begin_delete_database(database_id.resource_group, database_id.account, database_id.database)
    except RemoteAPIError as e:
        if was_not_found(e):
            logger.info(f"Cosmos Mongo Database {database_id.database} (Account {database_id.account}) was already deleted")
            return
        raise ResourceOperationError(
            f"Error deleting Cosmos Mongo Database {database_id.database} (Account {database_id.account})", e
        ) from e

    try:
        await operation.result()
    except RemoteAPIError as e:
        if was_not_found(e):
            return
        raise ResourceOperationError(
            f"Error waiting on delete future for Cosmos Mongo Database {database_id.database} (Account {database_id.account})", e
        ) from e
