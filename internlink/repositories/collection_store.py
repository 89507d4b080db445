"""
Collection adapter over a string key-value backend.

Every collection (users, internships, applications) is kept as one JSON array
under a fixed key. Reads fail open to an empty list; writes surface failures
as StorageWriteError.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence

from .kv_store import KeyValueStore, StorageError, StorageWriteError

logger = logging.getLogger(__name__)

USERS_KEY = "users"
INTERNSHIPS_KEY = "internships"
APPLICATIONS_KEY = "applications"
LAST_CLEANUP_KEY = "lastCleanup"
DATA_INITIALIZED_KEY = "dataInitialized"

COLLECTION_KEYS = (USERS_KEY, INTERNSHIPS_KEY, APPLICATIONS_KEY)


class CollectionStore:
    """Reads and writes whole collections of JSON records."""

    def __init__(self, backend: KeyValueStore) -> None:
        self.backend = backend

    def initialize(self) -> None:
        """Create every missing collection as an empty array; existing ones are untouched."""
        missing = {}
        for key in COLLECTION_KEYS:
            try:
                present = self.backend.get_item(key)
            except StorageError as exc:
                logger.warning("Error reading %s during initialization: %s", key, exc)
                continue
            if not present:
                missing[key] = "[]"
        if missing:
            self._set_items(missing)

    def read(self, key: str) -> list[dict[str, Any]]:
        try:
            raw = self.backend.get_item(key)
        except StorageError as exc:
            logger.warning("Error reading %s from storage: %s", key, exc)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Error parsing %s from storage: %s", key, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Stored %s is not a list; treating it as empty", key)
            return []
        return [item for item in data if isinstance(item, dict)]

    def write(self, key: str, items: Sequence[Mapping[str, Any]]) -> None:
        self.write_many({key: items})

    def write_many(self, collections: Mapping[str, Sequence[Mapping[str, Any]]], scalars: Optional[Mapping[str, str]] = None) -> None:
        """Persist several collections (and optional raw scalars) in one backend batch."""
        payload = {key: self._dumps(key, items) for key, items in collections.items()}
        payload.update(scalars or {})
        self._set_items(payload)

    def read_scalar(self, key: str) -> Optional[str]:
        try:
            return self.backend.get_item(key)
        except StorageError as exc:
            logger.warning("Error reading %s from storage: %s", key, exc)
            return None

    def write_scalar(self, key: str, value: str) -> None:
        self._set_items({key: value})

    def _dumps(self, key: str, items: Sequence[Mapping[str, Any]]) -> str:
        try:
            return json.dumps([dict(item) for item in items], ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageWriteError(key, f"Failed to serialize {key}: {exc}") from exc

    def _set_items(self, payload: Mapping[str, str]) -> None:
        try:
            self.backend.set_items(payload)
        except StorageError as exc:
            keys = ", ".join(payload)
            logger.error("Error writing to %s in storage: %s", keys, exc)
            raise StorageWriteError(keys) from exc
