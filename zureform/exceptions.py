"""
Provider Exceptions.

Exception hierarchy for resource operations, surfaced to the host
with operation context attached.

Author: Zureform Team
Date: 2026-10-17
"""

from typing import Any, Dict, List, Optional


class ProviderError(Exception):
    """Base exception for provider errors.

    Attributes:
        message: Error message
        partial_state: State record as it stood when the operation failed
    """

    def __init__(self, message: str):
        """Initialize provider error.

        Args:
            message: Error message
        """
        super().__init__(message)
        self.message = message
        self.partial_state: Optional[Dict[str, Any]] = None


class ConfigValidationError(ProviderError):
    """Raised when a resource configuration fails schema validation."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid configuration: " + "; ".join(self.errors))


class IDParseError(ProviderError):
    """Raised when a stored resource identifier cannot be parsed."""

    def __init__(self, resource_id: str, reason: str):
        super().__init__(f"Error parsing ID {resource_id!r}: {reason}")
        self.resource_id = resource_id
        self.reason = reason


class ImportAsExistsError(ProviderError):
    """Raised when creating a resource that already exists remotely."""

    def __init__(self, resource_type: str, resource_id: str):
        """Initialize import-as-exists error.

        Args:
            resource_type: Registered resource type name
            resource_id: Identifier of the existing remote resource
        """
        message = (
            f"A resource with the ID {resource_id!r} already exists - to be managed "
            f"this resource needs to be imported into the state. Please see the "
            f"resource documentation for {resource_type!r} for more information."
        )
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class RemoteAPIError(ProviderError):
    """Raised by clients when the control plane rejects a request.

    Attributes:
        status_code: HTTP status code (None for transport failures)
        error_code: ARM error code
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: str = "InternalServerError"
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class ResourceOperationError(ProviderError):
    """Remote failure wrapped with the operation and resource it affected."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class ThroughputNotConfigurableError(ResourceOperationError):
    """Throughput update rejected because the database has no throughput sub-resource."""

    HINT = (
        "If the database has not been created with an initial throughput, "
        "you cannot configure it later."
    )

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.message = f"{self.message} - {self.HINT}"
        self.args = (self.message,)


class OperationTimeoutError(ProviderError):
    """Raised when an operation exceeds its deadline or the host stops it."""

    def __init__(self, operation: str, timeout_seconds: float, stopped: bool = False):
        if stopped:
            message = f"Operation {operation!r} was cancelled by the host"
        else:
            message = f"Operation {operation!r} timed out after {timeout_seconds:g}s"
        super().__init__(message)
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        self.stopped = stopped


class UnknownResourceTypeError(ProviderError):
    """Raised when the host asks for a resource type that is not registered."""

    def __init__(self, resource_type: str):
        super().__init__(f"Unknown resource type {resource_type!r}")
        self.resource_type = resource_type
