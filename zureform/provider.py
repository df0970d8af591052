"""
Provider: the host calling convention.

Turns configuration into a control-plane client and exposes each
registered resource type through plain async calls: configuration in,
state record out, ``ProviderError`` out on failure.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from .clients.base import MongoDatabaseClient
from .core.config_manager import ClientType, ProviderConfig
from .core.logging_config import log_with_context, new_operation_id
from .core.timeouts import ResourceTimeouts
from .exceptions import ProviderError, UnknownResourceTypeError
from .resources.cosmosdb_mongo_database import RESOURCE_TYPE as MONGO_DATABASE, resource_cosmosdb_mongo_database
from .resources.data import ResourceData
from .schema.schema import Diff, Resource

logger = logging.getLogger(__name__)

State = Dict[str, Any]


def _credential(config: ProviderConfig) -> Any:
    """Build an async azure-identity credential from configuration."""
    from azure.identity.aio import ClientSecretCredential, DefaultAzureCredential

    if config.tenant_id and config.client_id and config.client_secret:
        return ClientSecretCredential(config.tenant_id, config.client_id, config.client_secret)
    return DefaultAzureCredential()


def build_client(config: ProviderConfig) -> MongoDatabaseClient:
    """
    Create the control-plane client selected by ``config.client.type``.

    Raises:
        ProviderError: If a remote client is requested without a subscription
    """
    client_config = config.client

    if client_config.type == ClientType.MEMORY:
        from .clients.memory import InMemoryMongoDatabaseClient
        return InMemoryMongoDatabaseClient(subscription_id=config.subscription_id)

    if not config.subscription_id:
        raise ProviderError("subscription_id must be configured (or set ARM_SUBSCRIPTION_ID)")

    if client_config.type == ClientType.REST:
        from .clients.rest import RestMongoDatabaseClient
        # The local emulator is served over plain HTTP without authentication
        credential = _credential(config) if client_config.endpoint.startswith("https://") else None
        return RestMongoDatabaseClient(
            config.subscription_id,
            endpoint=client_config.endpoint,
            api_version=client_config.api_version,
            credential=credential,
            poll_interval=client_config.poll_interval,
            close_credential=credential is not None,
        )

    from .clients.arm import ArmMongoDatabaseClient
    return ArmMongoDatabaseClient(
        _credential(config),
        config.subscription_id,
        endpoint=client_config.endpoint,
        close_credential=True,
    )


class Provider:
    """
    Entry point for the host.

    Args:
        config: Provider configuration (defaults when omitted)
        client: Control-plane client; built from ``config`` on first use
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        client: Optional[MongoDatabaseClient] = None,
    ):
        self.config = config or ProviderConfig()
        self.features = self.config.features
        self.stop_event = asyncio.Event()
        self._client = client

        timeouts = ResourceTimeouts(**self.config.timeouts.model_dump())
        self.resources: Dict[str, Resource] = {
            MONGO_DATABASE: resource_cosmosdb_mongo_database(),
        }
        for resource in self.resources.values():
            resource.timeouts = timeouts

    @property
    def client(self) -> MongoDatabaseClient:
        if self._client is None:
            self._client = build_client(self.config)
        return self._client

    def stop(self) -> None:
        """Abort every in-flight lifecycle call."""
        logger.warning("Stop requested, cancelling in-flight operations")
        self.stop_event.set()

    def resource(self, resource_type: str) -> Resource:
        try:
            return self.resources[resource_type]
        except KeyError:
            raise UnknownResourceTypeError(resource_type) from None

    def validate(self, resource_type: str, config: Mapping[str, Any]) -> None:
        """
        Validate a resource configuration.

        Raises:
            ConfigValidationError: If the configuration is invalid
        """
        self.resource(resource_type).validate(config)

    def plan(self, resource_type: str, config: Mapping[str, Any], prior_state: Optional[Mapping[str, Any]] = None) -> Diff:
        """Compare prior state with the desired configuration."""
        resource = self.resource(resource_type)
        resource.validate(config)
        return resource.diff(prior_state, config)

    async def _run(self, func: Any, d: ResourceData) -> None:
        try:
            await func(d, self)
        except ProviderError as e:
            e.partial_state = d.state()
            raise

    async def apply(
        self,
        resource_type: str,
        config: Mapping[str, Any],
        prior_state: Optional[Mapping[str, Any]] = None,
    ) -> Optional[State]:
        """
        Bring the remote resource in line with ``config``.

        Creates the resource when there is no prior state or it vanished
        remotely, replaces it when a force-new attribute changed and
        updates it in place otherwise.

        Returns:
            The new state record
        """
        resource = self.resource(resource_type)
        resource.validate(config)
        new_operation_id()

        if prior_state:
            prior_state = await self.refresh(resource_type, prior_state)

        if prior_state:
            diff = resource.diff(prior_state, config)
            if diff.requires_replace:
                log_with_context(
                    logger, logging.INFO,
                    f"Replacing {resource_type} {prior_state.get('id')}",
                    attributes=diff.requires_replace,
                )
                await self.destroy(resource_type, prior_state)
                prior_state = None
            elif diff.empty:
                logger.info(f"{resource_type} {prior_state.get('id')} is up to date")
                return dict(prior_state)

        d = ResourceData(resource.schema, config=config, state=prior_state, timeouts=resource.timeouts)
        if d.is_new_resource():
            logger.info(f"Creating {resource_type} {config.get('name')}")
            await self._run(resource.create, d)
        else:
            logger.info(f"Updating {resource_type} {d.id}")
            await self._run(resource.update, d)
        return d.state()

    async def refresh(self, resource_type: str, state: Mapping[str, Any]) -> Optional[State]:
        """
        Re-read the remote resource.

        Returns:
            The refreshed state record, or None if the resource is gone
        """
        resource = self.resource(resource_type)
        d = ResourceData(resource.schema, state=state, timeouts=resource.timeouts)
        await self._run(resource.read, d)
        return d.state()

    async def destroy(self, resource_type: str, state: Mapping[str, Any]) -> None:
        """Delete the remote resource described by ``state``."""
        resource = self.resource(resource_type)
        d = ResourceData(resource.schema, state=state, timeouts=resource.timeouts)
        logger.info(f"Destroying {resource_type} {d.id}")
        await self._run(resource.delete, d)

    async def import_resource(self, resource_type: str, resource_id: str) -> State:
        """
        Adopt an existing remote resource by identifier.

        Raises:
            ProviderError: If the type is not importable or nothing exists at ``resource_id``
        """
        resource = self.resource(resource_type)
        if not resource.importable:
            raise ProviderError(f"Resource type {resource_type!r} does not support import")
        new_operation_id()

        d = ResourceData(resource.schema, state={"id": resource_id}, timeouts=resource.timeouts)
        await self._run(resource.read, d)
        state = d.state()
        if state is None:
            raise ProviderError(
                f"Cannot import non-existent remote object {resource_id!r} ({resource_type})"
            )
        logger.info(f"Imported {resource_type} {resource_id}")
        return state

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def __aenter__(self) -> "Provider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
