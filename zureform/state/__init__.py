"""
State Backend Module.

Provides the local state store interface used by the host surface,
with in-memory and file-based implementations.

Author: Zureform Team
Date: 2026-10-17
"""

from .backend import StateBackend
from .memory_backend import InMemoryBackend
from .file_backend import FileBackend
from .exceptions import StateBackendError, SerializationError

__all__ = [
    # Abstract interface
    "StateBackend",
    # Implementations
    "InMemoryBackend",
    "FileBackend",
    # Exceptions
    "StateBackendError",
    "SerializationError",
]
