"""
Control-plane models.

Pydantic models for MongoDB database and throughput payloads, matching
the ARM REST shapes of the ``Microsoft.DocumentDB`` provider.

Author: Zureform Team
Date: 2026-10-17
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

MONGO_DATABASE_TYPE = "Microsoft.DocumentDB/databaseAccounts/mongodbDatabases"
THROUGHPUT_SETTINGS_TYPE = "Microsoft.DocumentDB/databaseAccounts/mongodbDatabases/throughputSettings"


class MongoDatabaseResource(BaseModel):
    """Database resource body (``properties.resource``)."""

    id: str


class MongoDatabaseProperties(BaseModel):
    """Database properties."""

    resource: Optional[MongoDatabaseResource] = None


class MongoDatabase(BaseModel):
    """MongoDB database as returned by the control plane.

    Attributes:
        id: Full ARM identifier
        name: Database name
        type: ARM resource type
        properties: Database properties
    """

    id: str
    name: str
    type: str = MONGO_DATABASE_TYPE
    properties: Optional[MongoDatabaseProperties] = None

    @property
    def resource_id(self) -> Optional[str]:
        """Database name reported in the resource body."""
        if self.properties and self.properties.resource:
            return self.properties.resource.id
        return None


class CreateUpdateOptions(BaseModel):
    """Options accepted by create/update calls."""

    throughput: Optional[int] = None

    model_config = ConfigDict(extra="allow")


class MongoDatabaseCreateUpdateParameters(BaseModel):
    """Create/update request for a MongoDB database."""

    resource: MongoDatabaseResource
    options: CreateUpdateOptions = Field(default_factory=CreateUpdateOptions)

    def to_arm(self) -> Dict[str, Any]:
        """ARM request body."""
        return {
            "properties": {
                "resource": self.resource.model_dump(),
                "options": self.options.model_dump(exclude_none=True),
            }
        }


class ThroughputSettingsResource(BaseModel):
    """Throughput resource body."""

    throughput: Optional[int] = None


class ThroughputSettingsProperties(BaseModel):
    """Throughput properties."""

    resource: Optional[ThroughputSettingsResource] = None


class ThroughputSettings(BaseModel):
    """Provisioned throughput attached to a database."""

    id: Optional[str] = None
    name: str = "default"
    type: str = THROUGHPUT_SETTINGS_TYPE
    properties: Optional[ThroughputSettingsProperties] = None

    @property
    def throughput(self) -> Optional[int]:
        if self.properties and self.properties.resource:
            return self.properties.resource.throughput
        return None
