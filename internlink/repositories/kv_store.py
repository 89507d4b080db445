"""
String-keyed key-value backends.

Each backend stores plain strings under string keys, the way browser local
storage does. Collections are layered on top by CollectionStore.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from internlink.db.create_tables import create_all
from internlink.db.models import KeyValueEntry

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for storage backend failures."""


class QuotaExceededError(StorageError):
    """Raised when a write would grow the store beyond its quota."""


class StorageWriteError(StorageError):
    """Raised to callers when a collection could not be persisted."""

    def __init__(self, key: str, message: str | None = None):
        super().__init__(message or f"Failed to save data to {key}")
        self.key = key


class KeyValueStore:
    """Interface shared by all backends."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        self.set_items({key: value})

    def set_items(self, items: Mapping[str, str]) -> None:
        """Write every pair or none of them."""
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> list[str]:
        raise NotImplementedError

    def clear(self) -> None:
        for key in self.keys():
            self.remove_item(key)


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store; quota_bytes > 0 caps the UTF-8 size of all keys and values."""

    def __init__(self, quota_bytes: int = 0) -> None:
        self._data: dict[str, str] = {}
        self.quota_bytes = max(0, int(quota_bytes or 0))

    def _size(self, data: Mapping[str, str]) -> int:
        return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in data.items())

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_items(self, items: Mapping[str, str]) -> None:
        candidate = dict(self._data)
        for key, value in items.items():
            if not isinstance(value, str):
                raise StorageError(f"Value for {key} must be a string")
            candidate[key] = value
        if self.quota_bytes and self._size(candidate) > self.quota_bytes:
            raise QuotaExceededError(f"Storage quota of {self.quota_bytes} exceeded")
        self._data = candidate

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileKeyValueStore(KeyValueStore):
    """All keys in one JSON object file, replaced atomically on every write."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: Mapping[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".kv-", suffix=".json", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(dict(data), f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def _load_for_write(self) -> dict[str, str]:
        try:
            return self._load()
        except StorageError as exc:
            # keep the unreadable file for inspection and start over empty
            backup = self.path.with_name(self.path.name + ".corrupt")
            logger.warning("%s; moving it to %s", exc, backup)
            try:
                os.replace(self.path, backup)
            except OSError as move_exc:
                raise StorageError(f"Could not move aside {self.path}: {move_exc}") from move_exc
            return {}

    def set_items(self, items: Mapping[str, str]) -> None:
        data = self._load_for_write()
        data.update(items)
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load_for_write()
        if key in data:
            del data[key]
            self._save(data)

    def keys(self) -> list[str]:
        return list(self._load())


class SQLKeyValueStore(KeyValueStore):
    """Key-value pairs in the kv_entries table; batches share one transaction."""

    def __init__(self, engine: Engine | None = None) -> None:
        try:
            self.engine = create_all(engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not prepare kv_entries: {exc}") from exc
        self._sessionmaker = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self._sessionmaker() as session:
                row = session.get(KeyValueEntry, key)
                return row.value if row else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read {key}: {exc}") from exc

    def set_items(self, items: Mapping[str, str]) -> None:
        with self._sessionmaker() as session:
            try:
                for key, value in items.items():
                    row = session.get(KeyValueEntry, key)
                    if row is None:
                        session.add(KeyValueEntry(key=key, value=value))
                    else:
                        row.value = value
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StorageError(f"Could not write {', '.join(items)}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        with self._sessionmaker() as session:
            try:
                session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StorageError(f"Could not remove {key}: {exc}") from exc

    def keys(self) -> list[str]:
        try:
            with self._sessionmaker() as session:
                return list(session.execute(select(KeyValueEntry.key).order_by(KeyValueEntry.key)).scalars())
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not list keys: {exc}") from exc
