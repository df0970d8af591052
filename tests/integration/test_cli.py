"""
Integration tests for the command-line interface.
"""

import asyncio
import json
import logging
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from zureform import provider as provider_module
from zureform.cli import cli
from zureform.clients.memory import InMemoryMongoDatabaseClient

DATABASE_ID = (
    "/subscriptions/00000000-0000-0000-0000-000000000000/resourceGroups/rg-app"
    "/providers/Microsoft.DocumentDB/databaseAccounts/app-cosmos/mongodbDatabases/appdb"
)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Config file, state path and a control plane shared across invocations."""
    for name in ("ARM_SUBSCRIPTION_ID", "ZUREFORM_CLIENT", "ZUREFORM_STATE_FILE",
                 "ZUREFORM_PROVIDER_STRICT", "ZUREFORM_LOG_LEVEL", "ZUREFORM_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)

    client = InMemoryMongoDatabaseClient()
    monkeypatch.setattr(provider_module, "build_client", lambda config: client)

    state_file = tmp_path / "state.json"
    config_file = tmp_path / "zureform.yaml"
    config_file.write_text(yaml.dump({
        "client": {"type": "memory"},
        "state": {"type": "file", "file_path": str(state_file)},
    }))

    def resource(config, name="main"):
        path = tmp_path / f"{name}.yaml"
        path.write_text(yaml.dump({"type": "cosmosdb_mongo_database", "name": name, "config": config}))
        return str(path)

    def invoke(*args):
        return CliRunner().invoke(cli, ["--config", str(config_file), "--log-level", "ERROR", *args])

    def state():
        if not state_file.exists():
            return {}
        return json.loads(state_file.read_text())["resources"].get("cosmosdb_mongo_database", {})

    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield SimpleNamespace(resource=resource, invoke=invoke, state=state, client=client)
    # The CLI points logging at the runner's streams
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


CONFIG = {"name": "appdb", "resource_group_name": "rg-app", "account_name": "app-cosmos"}


class TestValidateAndPlan:
    """Tests for validate and plan commands."""

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "zureform" in result.output

    def test_validate_ok(self, workspace):
        result = workspace.invoke("validate", workspace.resource(CONFIG))

        assert result.exit_code == 0
        assert "[OK] cosmosdb_mongo_database.main is valid" in result.output

    def test_validate_invalid(self, workspace):
        result = workspace.invoke("validate", workspace.resource({**CONFIG, "throughput": 450}))

        assert result.exit_code == 1
        assert "increments of 100" in result.output

    def test_validate_missing_type(self, workspace, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text(yaml.dump({"name": "main", "config": CONFIG}))

        result = workspace.invoke("validate", str(path))

        assert result.exit_code == 1
        assert "missing required key 'type'" in result.output

    def test_plan(self, workspace):
        resource = workspace.resource({**CONFIG, "throughput": 400})

        result = workspace.invoke("plan", resource)
        assert result.exit_code == 0
        assert "cosmosdb_mongo_database.main: create" in result.output

        workspace.invoke("apply", resource)
        result = workspace.invoke("plan", resource)
        assert "no changes" in result.output

        result = workspace.invoke("plan", workspace.resource({**CONFIG, "name": "otherdb"}))
        assert "replace" in result.output
        assert "forces replacement" in result.output


class TestLifecycleCommands:
    """Tests for apply, refresh, destroy and import."""

    def test_apply(self, workspace):
        result = workspace.invoke("apply", workspace.resource({**CONFIG, "throughput": 400}))

        assert result.exit_code == 0, result.output
        assert workspace.state()["main"] == {"id": DATABASE_ID, **CONFIG, "throughput": 400}

    def test_apply_failure_saves_partial_state(self, workspace):
        workspace.invoke("apply", workspace.resource(CONFIG))

        result = workspace.invoke("apply", workspace.resource({**CONFIG, "throughput": 400}))

        assert result.exit_code == 1
        assert "cannot configure it later" in result.output
        assert workspace.state()["main"]["throughput"] is None

    def test_refresh_after_remote_delete(self, workspace):
        resource = workspace.resource(CONFIG)
        workspace.invoke("apply", resource)
        asyncio.run(workspace.client.begin_delete_database("rg-app", "app-cosmos", "appdb"))

        result = workspace.invoke("refresh", resource)

        assert result.exit_code == 0
        assert "no longer exists" in result.output
        assert workspace.state() == {}

    def test_refresh_without_state(self, workspace):
        result = workspace.invoke("refresh", workspace.resource(CONFIG))

        assert result.exit_code == 1
        assert "No state for cosmosdb_mongo_database.main" in result.output

    def test_refresh(self, workspace):
        resource = workspace.resource(CONFIG)
        workspace.invoke("apply", resource)

        result = workspace.invoke("refresh", resource)

        assert result.exit_code == 0
        assert json.loads(result.stdout)["id"] == DATABASE_ID

    def test_destroy(self, workspace):
        resource = workspace.resource(CONFIG)
        workspace.invoke("apply", resource)

        result = workspace.invoke("destroy", resource)

        assert result.exit_code == 0
        assert "destroyed" in result.output
        assert workspace.state() == {}

        result = workspace.invoke("destroy", resource)
        assert "nothing to destroy" in result.output

    def test_import(self, workspace):
        resource = workspace.resource(CONFIG)
        workspace.invoke("apply", workspace.resource({**CONFIG, "throughput": 500}, name="other"))

        result = workspace.invoke("import", resource, DATABASE_ID)

        assert result.exit_code == 0, result.output
        assert workspace.state()["main"] == {"id": DATABASE_ID, **CONFIG, "throughput": 500}

        result = workspace.invoke("import", resource, DATABASE_ID)
        assert result.exit_code == 1
        assert "already managed" in result.output

    def test_import_missing(self, workspace):
        result = workspace.invoke("import", workspace.resource(CONFIG), DATABASE_ID)

        assert result.exit_code == 1
        assert "non-existent" in result.output

    def test_import_conflict_hint(self, workspace, monkeypatch):
        resource = workspace.resource(CONFIG)
        workspace.invoke("apply", resource)
        monkeypatch.setenv("ZUREFORM_PROVIDER_STRICT", "true")

        result = workspace.invoke("apply", workspace.resource(CONFIG, name="second"))

        assert result.exit_code == 1
        assert "needs to be imported" in result.output
        assert f"zureform import <file> {DATABASE_ID}" in result.output


class TestEmulateCommand:
    """Tests for serving the emulator."""

    def test_emulate_defaults(self, workspace):
        with patch("zureform.cli.uvicorn.run") as run:
            result = workspace.invoke("emulate")

        assert result.exit_code == 0, result.output
        assert "Starting Zureform emulator" in result.output
        _, kwargs = run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 8090
        # --log-level ERROR from the workspace invocation
        assert kwargs["log_level"] == "error"

    def test_emulate_uses_configured_level(self, workspace):
        with patch("zureform.cli.uvicorn.run") as run:
            result = CliRunner().invoke(cli, ["emulate", "--host", "0.0.0.0", "--port", "9000"])

        assert result.exit_code == 0, result.output
        _, kwargs = run.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
        assert kwargs["log_level"] == "info"
