"""
Configuration management for Zureform.

Handles loading, validation, and access to provider configuration settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://management.azure.com"
DEFAULT_API_VERSION = "2021-10-15"


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ClientType(str, Enum):
    """Supported control-plane client implementations."""
    ARM = "arm"
    REST = "rest"
    MEMORY = "memory"


class StateBackendType(str, Enum):
    """Supported local state backend types."""
    MEMORY = "memory"
    FILE = "file"


class FeaturesConfig(BaseModel):
    """Provider feature toggles."""
    resources_should_be_imported: bool = Field(
        default=False,
        description="Fail creation when the remote resource already exists"
    )


class ClientConfig(BaseModel):
    """Control-plane client configuration."""
    type: ClientType = ClientType.ARM
    endpoint: str = DEFAULT_ENDPOINT
    api_version: str = DEFAULT_API_VERSION
    poll_interval: float = Field(
        default=5.0,
        ge=0.0,
        description="Seconds between long-running operation polls"
    )


class TimeoutsConfig(BaseModel):
    """Default operation timeouts in seconds."""
    create: float = Field(default=30 * 60, gt=0.0)
    read: float = Field(default=5 * 60, gt=0.0)
    update: float = Field(default=30 * 60, gt=0.0)
    delete: float = Field(default=30 * 60, gt=0.0)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "text"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'zureform.clients': 'DEBUG'}"
    )

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v


class StateConfig(BaseModel):
    """Local state backend configuration."""
    type: StateBackendType = StateBackendType.FILE
    file_path: str = "zureform.state.json"


class EmulatorConfig(BaseModel):
    """Control-plane emulator server configuration."""
    host: str = "127.0.0.1"
    port: int = 8090


class ProviderConfig(BaseModel):
    """Main Zureform provider configuration schema."""

    version: str = Field(default="0.1.0", description="Configuration version")

    subscription_id: Optional[str] = None
    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    features: FeaturesConfig = Field(default_factory=FeaturesConfig)

    client: ClientConfig = Field(default_factory=ClientConfig)

    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    state: StateConfig = Field(default_factory=StateConfig)

    emulator: EmulatorConfig = Field(default_factory=EmulatorConfig)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate version format."""
        parts = v.split(".")
        if len(parts) != 3:
            raise ValueError("Version must be in format x.y.z")
        for part in parts:
            if not part.isdigit():
                raise ValueError("Version components must be numeric")
        return v

    model_config = ConfigDict(use_enum_values=True)


class ConfigManager:
    """
    Manages Zureform configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (ARM_*, ZUREFORM_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self):
        self._config: Optional[ProviderConfig] = None
        self._config_file: Optional[Path] = None

    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> ProviderConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            Validated ProviderConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.info("Loading Zureform configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = load_document(config_file)
            self._config_file = Path(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.info(f"Applied {len(env_config)} environment variable overrides")

        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.info(f"Applied {len(cli_overrides)} CLI argument overrides")

        try:
            self._config = ProviderConfig(**config_dict)
            logger.info("Configuration validated successfully")
            self._log_configuration()
            return self._config
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        # Credentials
        for env_name, key in (
            ("ARM_SUBSCRIPTION_ID", "subscription_id"),
            ("ARM_TENANT_ID", "tenant_id"),
            ("ARM_CLIENT_ID", "client_id"),
            ("ARM_CLIENT_SECRET", "client_secret"),
        ):
            if value := os.getenv(env_name):
                config[key] = value

        # Features
        if strict := os.getenv("ZUREFORM_PROVIDER_STRICT"):
            config.setdefault("features", {})["resources_should_be_imported"] = (
                strict.lower() in ['true', '1', 'yes']
            )

        # Client
        if client_type := os.getenv("ZUREFORM_CLIENT"):
            config.setdefault("client", {})["type"] = client_type.lower()
        if endpoint := os.getenv("ZUREFORM_ENDPOINT"):
            config.setdefault("client", {})["endpoint"] = endpoint

        # Logging
        if log_level := os.getenv("ZUREFORM_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_file := os.getenv("ZUREFORM_LOG_FILE"):
            config.setdefault("logging", {})["file"] = log_file

        # State
        if state_file := os.getenv("ZUREFORM_STATE_FILE"):
            config.setdefault("state", {})["file_path"] = state_file

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _log_configuration(self) -> None:
        """Log the loaded configuration (with sensitive data redacted)."""
        if not self._config:
            return

        config_dict = self._config.model_dump()

        if config_dict.get("client_secret"):
            config_dict["client_secret"] = "***REDACTED***"

        logger.debug(f"Active configuration: {json.dumps(config_dict, indent=2)}")

    def get_config(self) -> ProviderConfig:
        """
        Get the loaded configuration.

        Returns:
            ProviderConfig instance

        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def reload(self) -> ProviderConfig:
        """
        Reload configuration from the same sources.

        Returns:
            Reloaded ProviderConfig instance
        """
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)


def load_document(file_path: str) -> Dict[str, Any]:
    """Load a YAML or JSON document from disk."""
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with open(path, 'r') as f:
        if path.suffix in ['.yaml', '.yml']:
            return yaml.safe_load(f) or {}
        elif path.suffix == '.json':
            return json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")
