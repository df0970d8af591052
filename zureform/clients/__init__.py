"""
Control-plane clients.

Concrete clients live in their own modules (``arm``, ``rest``, ``memory``)
so the Azure SDK is only imported when it is used.
"""

from .base import MongoDatabaseClient, LongRunningOperation, CompletedOperation
from .models import (
    MongoDatabase,
    MongoDatabaseCreateUpdateParameters,
    MongoDatabaseResource,
    CreateUpdateOptions,
    ThroughputSettings,
)

__all__ = [
    "MongoDatabaseClient",
    "LongRunningOperation",
    "CompletedOperation",
    "MongoDatabase",
    "MongoDatabaseCreateUpdateParameters",
    "MongoDatabaseResource",
    "CreateUpdateOptions",
    "ThroughputSettings",
]
