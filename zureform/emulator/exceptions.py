"""
Emulator Exceptions.

Exception classes for the control-plane emulator, carrying the ARM error
code and HTTP status each one maps to.

Author: Zureform Team
Date: 2026-10-17
"""


class EmulatorError(Exception):
    """Base exception for emulator errors.

    Attributes:
        message: Error message
        error_code: ARM error code
        status_code: HTTP status code
    """

    def __init__(self, message: str, error_code: str = "InternalServerError", status_code: int = 500):
        """Initialize emulator error.

        Args:
            message: Error message
            error_code: ARM error code
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code


class DatabaseNotFoundError(EmulatorError):
    """Database not found error."""

    def __init__(self, account: str, database: str):
        super().__init__(
            f"Database '{database}' not found in account '{account}'",
            "NotFound",
            404,
        )
        self.account = account
        self.database = database


class ThroughputNotFoundError(EmulatorError):
    """Throughput settings not found error."""

    def __init__(self, account: str, database: str):
        super().__init__(
            f"Throughput settings for database '{database}' in account '{account}' were not found",
            "NotFound",
            404,
        )
        self.account = account
        self.database = database


class OperationNotFoundError(EmulatorError):
    """Async operation not found error."""

    def __init__(self, operation_id: str):
        super().__init__(f"Operation '{operation_id}' not found", "NotFound", 404)
        self.operation_id = operation_id


class BadRequestError(EmulatorError):
    """Bad request error."""

    def __init__(self, message: str):
        super().__init__(message, "BadRequest", 400)
