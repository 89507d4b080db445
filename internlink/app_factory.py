"""Process bootstrap: pick a backend, prepare storage, run cleanup if due."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from internlink.core.config import Settings, get_settings
from internlink.db.session import make_engine
from internlink.repositories.collection_store import CollectionStore
from internlink.repositories.kv_store import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SQLKeyValueStore,
)
from internlink.services.data_service import DataService
from internlink.services.retention_service import RetentionSweeper

logger = logging.getLogger(__name__)


def build_backend(settings: Settings) -> KeyValueStore:
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryKeyValueStore(quota_bytes=settings.storage_quota_bytes)
    if backend == "json":
        return JsonFileKeyValueStore(settings.storage_path)
    if backend == "sql":
        return SQLKeyValueStore(make_engine(settings.database_url))
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


def build_store(settings: Optional[Settings] = None) -> CollectionStore:
    return CollectionStore(build_backend(settings or get_settings()))


def create_data_service(
    settings: Optional[Settings] = None,
    *,
    store: Optional[CollectionStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> DataService:
    """Build the repository handle once at process start and pass it to callers."""
    settings = settings or get_settings()
    store = store or build_store(settings)
    store.initialize()
    RetentionSweeper(store, settings=settings, clock=clock).run_if_due()
    logger.debug("Data service ready on %s backend", settings.storage_backend)
    return DataService(store, settings=settings, clock=clock)


__all__ = ["build_backend", "build_store", "create_data_service"]
