"""
File State Backend Implementation.

Persists state records in a single JSON document so they survive between
CLI runs. Writes go to a temporary file that atomically replaces the
previous document.

Document format:
{
    "version": 1,
    "resources": {
        "cosmosdb_mongo_database": {
            "main": {"id": "...", "name": "...", ...}
        }
    }
}

Author: Zureform Team
Date: 2026-10-17
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .backend import StateBackend
from .exceptions import StateBackendError
from .memory_backend import serialize

logger = logging.getLogger(__name__)

STATE_FORMAT_VERSION = 1


class FileBackend(StateBackend):
    """JSON file state backend."""

    def __init__(self, file_path: str):
        self.path = Path(file_path)
        self._lock = asyncio.Lock()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise StateBackendError(f"Cannot read state file {self.path}: {e}")

        version = document.get("version") if isinstance(document, dict) else None
        if version != STATE_FORMAT_VERSION:
            raise StateBackendError(
                f"Unsupported state file version {version!r} in {self.path}"
            )
        return document.get("resources", {})

    def _save(self, resources: Dict[str, Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        document = {"version": STATE_FORMAT_VERSION, "resources": resources}
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StateBackendError(f"Cannot write state file {self.path}: {e}")
        logger.debug(f"State written to {self.path}")

    async def get(
        self, namespace: str, key: str, default: Optional[Any] = None
    ) -> Optional[Any]:
        async with self._lock:
            return self._load().get(namespace, {}).get(key, default)

    async def set(self, namespace: str, key: str, value: Any) -> None:
        serialized_value = serialize(value)
        async with self._lock:
            resources = self._load()
            resources.setdefault(namespace, {})[key] = serialized_value
            self._save(resources)

    async def delete(self, namespace: str, key: str) -> bool:
        async with self._lock:
            resources = self._load()
            if key not in resources.get(namespace, {}):
                return False
            del resources[namespace][key]
            if not resources[namespace]:
                del resources[namespace]
            self._save(resources)
            return True

    async def list(self, namespace: str) -> List[str]:
        async with self._lock:
            return sorted(self._load().get(namespace, {}))
