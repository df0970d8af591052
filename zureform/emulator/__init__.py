"""
Cosmos DB Control-Plane Emulator.

Provides local emulation of the ARM endpoints for MongoDB databases and
their throughput settings, for development and integration testing.

Author: Zureform Team
Date: 2026-10-17
"""

from .backend import EmulatorBackend, OperationStatus
from .exceptions import (
    EmulatorError,
    DatabaseNotFoundError,
    ThroughputNotFoundError,
    OperationNotFoundError,
    BadRequestError,
)
from .routes import create_app, create_router, get_backend

__all__ = [
    # Backend
    "EmulatorBackend",
    "OperationStatus",
    # Routes
    "create_app",
    "create_router",
    "get_backend",
    # Exceptions
    "EmulatorError",
    "DatabaseNotFoundError",
    "ThroughputNotFoundError",
    "OperationNotFoundError",
    "BadRequestError",
]
