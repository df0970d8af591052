"""
State Backend Exceptions.

Custom exceptions for local state storage operations.

Author: Zureform Team
Date: 2026-10-17
"""


class StateBackendError(Exception):
    """Base exception for all state backend errors."""

    pass


class SerializationError(StateBackendError):
    """Raised when value serialization/deserialization fails."""

    pass
