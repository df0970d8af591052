"""
Response inspection helpers.

Author: Zureform Team
Date: 2026-10-17
"""

from typing import Optional


def status_code_of(error: Optional[BaseException]) -> Optional[int]:
    """Return the HTTP status code carried by an error, if any."""
    if error is None:
        return None
    status_code = getattr(error, "status_code", None)
    if status_code is None:
        # azure-core keeps the status on the attached response as well
        response = getattr(error, "response", None)
        status_code = getattr(response, "status_code", None)
    return status_code


def was_not_found(error: Optional[BaseException]) -> bool:
    """Check whether a remote call failed with 404 Not Found."""
    return status_code_of(error) == 404
