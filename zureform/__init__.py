"""
Zureform: Cosmos DB MongoDB database provisioning

Declarative lifecycle management (create, read, update, delete, import)
for MongoDB databases in Azure Cosmos DB accounts.
"""

__version__ = "0.1.0"
__author__ = "Zureform Team"

from .provider import Provider

__all__ = ["Provider", "__version__"]
