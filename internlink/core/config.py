"""
Configuration helpers for the InternLink data layer.

Settings are read from environment variables once and cached, so that stores
and services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    storage_backend: str
    storage_path: str
    database_url: str
    storage_quota_bytes: int
    cleanup_interval_days: int
    retention_months: int
    hash_passwords: bool
    strict_integrity: bool
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        storage_backend=(os.getenv("STORAGE_BACKEND") or "memory").strip().lower(),
        storage_path=os.getenv("STORAGE_PATH", "data/storage.json"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///data/storage.db"),
        storage_quota_bytes=_int(os.getenv("STORAGE_QUOTA_BYTES", "0"), 0),
        cleanup_interval_days=_int(os.getenv("CLEANUP_INTERVAL_DAYS", "7"), 7),
        retention_months=_int(os.getenv("RETENTION_MONTHS", "6"), 6),
        hash_passwords=_bool(os.getenv("HASH_PASSWORDS"), False),
        strict_integrity=_bool(os.getenv("STRICT_INTEGRITY"), False),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
