"""
Tests for the Provider host calls.
"""

import pytest

from zureform.clients.memory import InMemoryMongoDatabaseClient
from zureform.clients.rest import RestMongoDatabaseClient
from zureform.core.config_manager import ProviderConfig
from zureform.exceptions import (
    ConfigValidationError,
    ImportAsExistsError,
    ProviderError,
    RemoteAPIError,
    ThroughputNotConfigurableError,
    UnknownResourceTypeError,
)
from zureform.provider import Provider, build_client

TYPE = "cosmosdb_mongo_database"
SUBSCRIPTION = "00000000-0000-0000-0000-000000000000"
DATABASE_ID = (
    f"/subscriptions/{SUBSCRIPTION}/resourceGroups/rg-app"
    "/providers/Microsoft.DocumentDB/databaseAccounts/app-cosmos/mongodbDatabases/appdb"
)
CONFIG = {"name": "appdb", "resource_group_name": "rg-app", "account_name": "app-cosmos"}


@pytest.fixture
def client():
    return InMemoryMongoDatabaseClient()


@pytest.fixture
def provider(client):
    return Provider(ProviderConfig(), client=client)


class TestBuildClient:
    """Tests for build_client."""

    def test_memory(self):
        client = build_client(ProviderConfig(client={"type": "memory"}, subscription_id="sub"))

        assert isinstance(client, InMemoryMongoDatabaseClient)
        assert client.subscription_id == "sub"

    def test_remote_requires_subscription(self):
        with pytest.raises(ProviderError, match="subscription_id"):
            build_client(ProviderConfig(client={"type": "rest"}))

    @pytest.mark.asyncio
    async def test_rest_against_plain_http(self):
        config = ProviderConfig(
            subscription_id="sub",
            client={"type": "rest", "endpoint": "http://127.0.0.1:8090", "poll_interval": 0.5},
        )

        client = build_client(config)

        assert isinstance(client, RestMongoDatabaseClient)
        assert client._credential is None
        assert client.poll_interval == 0.5
        await client.close()


class TestProviderBasics:
    """Registration, validation and plans."""

    def test_unknown_type(self, provider):
        with pytest.raises(UnknownResourceTypeError):
            provider.resource("cosmosdb_sql_database")

    def test_timeouts_from_config(self, client):
        provider = Provider(ProviderConfig(timeouts={"read": 42}), client=client)

        assert provider.resource(TYPE).timeouts.read == 42

    def test_validate(self, provider):
        provider.validate(TYPE, CONFIG)
        with pytest.raises(ConfigValidationError):
            provider.validate(TYPE, {**CONFIG, "throughput": 401})

    def test_plan_create(self, provider):
        diff = provider.plan(TYPE, CONFIG)

        assert set(diff.changes) == {"name", "resource_group_name", "account_name"}
        assert diff.requires_replace == []

    def test_plan_replace(self, provider):
        prior = {"id": DATABASE_ID, **CONFIG, "throughput": None}

        diff = provider.plan(TYPE, {**CONFIG, "name": "otherdb"}, prior)

        assert diff.requires_replace == ["name"]


class TestProviderLifecycle:
    """apply, refresh, destroy and import."""

    @pytest.mark.asyncio
    async def test_apply_creates(self, provider):
        state = await provider.apply(TYPE, {**CONFIG, "throughput": 400})

        assert state == {"id": DATABASE_ID, **CONFIG, "throughput": 400}

    @pytest.mark.asyncio
    async def test_apply_is_idempotent(self, provider):
        state = await provider.apply(TYPE, {**CONFIG, "throughput": 400})

        assert await provider.apply(TYPE, {**CONFIG, "throughput": 400}, state) == state

    @pytest.mark.asyncio
    async def test_apply_updates_throughput(self, provider, client):
        state = await provider.apply(TYPE, {**CONFIG, "throughput": 400})

        state = await provider.apply(TYPE, {**CONFIG, "throughput": 600}, state)

        assert state["throughput"] == 600
        assert (await client.get_database_throughput("rg-app", "app-cosmos", "appdb")).throughput == 600

    @pytest.mark.asyncio
    async def test_apply_replaces_on_rename(self, provider, client):
        state = await provider.apply(TYPE, CONFIG)

        state = await provider.apply(TYPE, {**CONFIG, "name": "otherdb"}, state)

        assert state["name"] == "otherdb"
        assert state["id"].endswith("/mongodbDatabases/otherdb")
        with pytest.raises(ProviderError):
            await client.get_database("rg-app", "app-cosmos", "appdb")

    @pytest.mark.asyncio
    async def test_apply_recreates_vanished_resource(self, provider, client):
        state = await provider.apply(TYPE, CONFIG)
        await client.begin_delete_database("rg-app", "app-cosmos", "appdb")

        state = await provider.apply(TYPE, CONFIG, state)

        assert state["id"] == DATABASE_ID
        assert (await client.get_database("rg-app", "app-cosmos", "appdb")).name == "appdb"

    @pytest.mark.asyncio
    async def test_apply_failure_reports_partial_state(self, provider):
        state = await provider.apply(TYPE, CONFIG)

        with pytest.raises(ThroughputNotConfigurableError) as exc_info:
            await provider.apply(TYPE, {**CONFIG, "throughput": 400}, state)

        assert exc_info.value.partial_state == {"id": DATABASE_ID, **CONFIG, "throughput": None}

    @pytest.mark.asyncio
    async def test_apply_with_import_check(self, client):
        strict = Provider(
            ProviderConfig(features={"resources_should_be_imported": True}), client=client
        )
        await Provider(ProviderConfig(), client=client).apply(TYPE, CONFIG)

        with pytest.raises(ImportAsExistsError):
            await strict.apply(TYPE, CONFIG)

    @pytest.mark.asyncio
    async def test_apply_invalid_config(self, provider, client):
        with pytest.raises(ConfigValidationError):
            await provider.apply(TYPE, {**CONFIG, "account_name": "UPPER"})

    @pytest.mark.asyncio
    async def test_refresh_and_destroy(self, provider):
        state = await provider.apply(TYPE, CONFIG)

        assert await provider.refresh(TYPE, state) == state

        await provider.destroy(TYPE, state)

        assert await provider.refresh(TYPE, state) is None

    @pytest.mark.asyncio
    async def test_import(self, provider):
        created = await provider.apply(TYPE, {**CONFIG, "throughput": 500})

        imported = await provider.import_resource(TYPE, DATABASE_ID)

        assert imported == created

    @pytest.mark.asyncio
    async def test_import_missing(self, provider):
        with pytest.raises(ProviderError, match="non-existent"):
            await provider.import_resource(TYPE, DATABASE_ID)

    @pytest.mark.asyncio
    async def test_stop(self, provider, client):
        provider.stop()

        with pytest.raises(ProviderError, match="cancelled by the host") as exc_info:
            await provider.apply(TYPE, CONFIG)

        assert exc_info.value.partial_state is None
        with pytest.raises(RemoteAPIError):
            await client.get_database("rg-app", "app-cosmos", "appdb")

    @pytest.mark.asyncio
    async def test_context_manager(self, client):
        async with Provider(ProviderConfig(), client=client) as provider:
            await provider.apply(TYPE, CONFIG)
