"""Resources module initialization."""

from .data import ResourceData
from .ids import CosmosDatabaseID, parse_cosmos_database_id, cosmos_id_from_response

__all__ = [
    "ResourceData",
    "CosmosDatabaseID",
    "parse_cosmos_database_id",
    "cosmos_id_from_response",
]
