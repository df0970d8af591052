"""Core module initialization."""

from .config_manager import ConfigManager, ProviderConfig, load_document
from .logging_config import setup_logging, get_logger
from .timeouts import ResourceTimeouts, TimeoutKind, with_timeout, parse_duration

__all__ = [
    "ConfigManager",
    "ProviderConfig",
    "load_document",
    "setup_logging",
    "get_logger",
    "ResourceTimeouts",
    "TimeoutKind",
    "with_timeout",
    "parse_duration",
]
