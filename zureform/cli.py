"""
Zureform Command-Line Interface

Validates resource files and runs lifecycle calls against the control
plane, keeping state records in the configured state backend.

Resource files are YAML or JSON documents:

    type: cosmosdb_mongo_database
    name: main
    config:
      name: appdb
      resource_group_name: rg-app
      account_name: app-cosmos
      throughput: 400

Author: Zureform Team
Date: 2026-10-17
"""

import sys
import json
import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import click
import uvicorn
from pydantic import ValidationError

from . import __version__
from .core.config_manager import ConfigManager, ProviderConfig, StateBackendType, load_document
from .core.logging_config import setup_logging
from .exceptions import ImportAsExistsError, ProviderError
from .provider import Provider
from .state import FileBackend, InMemoryBackend, StateBackend, StateBackendError

logger = logging.getLogger("zureform.cli")


def _load_resource_file(path: Path) -> Tuple[str, str, Dict[str, Any]]:
    document = load_document(str(path))
    try:
        resource_type = document["type"]
        name = document["name"]
    except KeyError as e:
        raise ValueError(f"{path}: missing required key {e.args[0]!r}")
    config = document.get("config") or {}
    if not isinstance(config, dict):
        raise ValueError(f"{path}: 'config' must be a mapping")
    return resource_type, name, config


def _state_backend(config: ProviderConfig) -> StateBackend:
    if config.state.type == StateBackendType.MEMORY:
        return InMemoryBackend()
    return FileBackend(config.state.file_path)


def _echo_state(state: Optional[Dict[str, Any]]) -> None:
    click.echo(json.dumps(state, indent=2, sort_keys=True))


def _run(ctx: click.Context, body: Callable[[Provider, StateBackend], Awaitable[None]]) -> None:
    """Run an async command body with a provider, reporting failures."""
    config: ProviderConfig = ctx.obj["config"]
    state_backend = _state_backend(config)

    async def main() -> None:
        async with Provider(config) as provider:
            await body(provider, state_backend)

    try:
        asyncio.run(main())
    except ImportAsExistsError as e:
        click.echo(f"[ERROR] {e.message}", err=True)
        click.echo(f"Run 'zureform import <file> {e.resource_id}' to adopt it.", err=True)
        sys.exit(1)
    except (ProviderError, StateBackendError, ValidationError, ValueError, FileNotFoundError) as e:
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)


async def _save(state_backend: StateBackend, resource_type: str, name: str, state: Optional[Dict[str, Any]]) -> None:
    if state is None:
        await state_backend.delete(resource_type, name)
    else:
        await state_backend.set(resource_type, name, state)


@click.group()
@click.version_option(version=__version__, prog_name="zureform")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to provider configuration file",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], log_level: Optional[str]):
    """
    Zureform - Cosmos DB MongoDB database provisioning

    Create, read, update and delete MongoDB databases from declarative files.
    """
    ctx.ensure_object(dict)

    overrides = {"logging": {"level": log_level.upper()}} if log_level else None
    try:
        config = ConfigManager().load(
            config_file=str(config_file) if config_file else None,
            cli_overrides=overrides,
        )
    except (ValidationError, ValueError) as e:
        click.echo(f"[ERROR] Invalid configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        log_file=config.logging.file,
        rotation_size=config.logging.rotation_size,
        rotation_count=config.logging.rotation_count,
        module_levels=config.logging.module_levels,
    )
    ctx.obj["config"] = config


@cli.command()
@click.argument("resource_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx: click.Context, resource_file: Path):
    """Validate a resource file without contacting the control plane."""
    try:
        resource_type, name, config = _load_resource_file(resource_file)
        Provider(ctx.obj["config"]).validate(resource_type, config)
    except (ProviderError, ValueError) as e:
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)
    click.echo(f"[OK] {resource_type}.{name} is valid")


@cli.command()
@click.argument("resource_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def plan(ctx: click.Context, resource_file: Path):
    """Show what apply would change, compared to the stored state."""
    async def body(provider: Provider, state_backend: StateBackend) -> None:
        resource_type, name, config = _load_resource_file(resource_file)
        prior = await state_backend.get(resource_type, name)
        diff = provider.plan(resource_type, config, prior)
        if diff.empty:
            click.echo(f"{resource_type}.{name}: no changes")
            return
        action = "create" if not prior else ("replace" if diff.requires_replace else "update")
        click.echo(f"{resource_type}.{name}: {action}")
        for key, (old, new) in sorted(diff.changes.items()):
            marker = " (forces replacement)" if key in diff.requires_replace else ""
            click.echo(f"  {key}: {old!r} -> {new!r}{marker}")

    _run(ctx, body)


@cli.command()
@click.argument("resource_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def apply(ctx: click.Context, resource_file: Path):
    """Create or update the resource described by a resource file."""
    async def body(provider: Provider, state_backend: StateBackend) -> None:
        resource_type, name, config = _load_resource_file(resource_file)
        prior = await state_backend.get(resource_type, name)
        try:
            state = await provider.apply(resource_type, config, prior)
        except ProviderError as e:
            if e.partial_state is not None:
                await _save(state_backend, resource_type, name, e.partial_state)
            raise
        await _save(state_backend, resource_type, name, state)
        _echo_state(state)

    _run(ctx, body)


@cli.command()
@click.argument("resource_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def refresh(ctx: click.Context, resource_file: Path):
    """Re-read the remote resource into the stored state."""
    async def body(provider: Provider, state_backend: StateBackend) -> None:
        resource_type, name, _ = _load_resource_file(resource_file)
        prior = await state_backend.get(resource_type, name)
        if not prior:
            raise ProviderError(f"No state for {resource_type}.{name}")
        state = await provider.refresh(resource_type, prior)
        await _save(state_backend, resource_type, name, state)
        if state is None:
            click.echo(f"{resource_type}.{name} no longer exists and was removed from state")
        else:
            _echo_state(state)

    _run(ctx, body)


@cli.command()
@click.argument("resource_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def destroy(ctx: click.Context, resource_file: Path):
    """Delete the remote resource and its stored state."""
    async def body(provider: Provider, state_backend: StateBackend) -> None:
        resource_type, name, _ = _load_resource_file(resource_file)
        prior = await state_backend.get(resource_type, name)
        if not prior:
            click.echo(f"{resource_type}.{name} has no state, nothing to destroy")
            return
        await provider.destroy(resource_type, prior)
        await state_backend.delete(resource_type, name)
        click.echo(f"[OK] {resource_type}.{name} destroyed")

    _run(ctx, body)


@cli.command(name="import")
@click.argument("resource_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("resource_id")
@click.pass_context
def import_command(ctx: click.Context, resource_file: Path, resource_id: str):
    """Adopt an existing remote resource into the stored state."""
    async def body(provider: Provider, state_backend: StateBackend) -> None:
        resource_type, name, _ = _load_resource_file(resource_file)
        if await state_backend.exists(resource_type, name):
            raise ProviderError(f"{resource_type}.{name} is already managed")
        state = await provider.import_resource(resource_type, resource_id)
        await _save(state_backend, resource_type, name, state)
        _echo_state(state)

    _run(ctx, body)


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default from configuration)")
@click.option("--port", default=None, type=int, help="Port to bind to (default from configuration)")
@click.pass_context
def emulate(ctx: click.Context, host: Optional[str], port: Optional[int]):
    """
    Serve the local control-plane emulator.

    Examples:
        zureform emulate
        zureform emulate --port 9000
    """
    from .emulator.routes import create_app

    config: ProviderConfig = ctx.obj["config"]
    host = host or config.emulator.host
    port = port or config.emulator.port

    click.echo(f"Starting Zureform emulator v{__version__} on {host}:{port}")
    try:
        uvicorn.run(create_app(), host=host, port=port, log_level=config.logging.level.value.lower())
    except KeyboardInterrupt:
        click.echo("\nShutting down emulator...")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
