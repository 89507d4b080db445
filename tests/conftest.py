"""Pytest fixtures: settings, frozen clock, in-memory and SQLite-backed stores."""
from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Make the internlink package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from internlink.core.config import Settings  # noqa: E402
from internlink.db.session import make_engine  # noqa: E402
from internlink.repositories.collection_store import CollectionStore  # noqa: E402
from internlink.repositories.kv_store import MemoryKeyValueStore  # noqa: E402
from internlink.services.data_service import DataService  # noqa: E402

BASE_SETTINGS = Settings(
    storage_backend="memory",
    storage_path="",
    database_url="",
    storage_quota_bytes=0,
    cleanup_interval_days=7,
    retention_months=6,
    hash_passwords=False,
    strict_integrity=False,
    log_level="DEBUG",
)


def make_settings(**overrides) -> Settings:
    return replace(BASE_SETTINGS, **overrides)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture()
def settings():
    return make_settings()


@pytest.fixture()
def clock():
    return FrozenClock(datetime(2024, 9, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def backend():
    return MemoryKeyValueStore()


@pytest.fixture()
def store(backend):
    collections = CollectionStore(backend)
    collections.initialize()
    return collections


@pytest.fixture()
def service(store, settings, clock):
    return DataService(store, settings=settings, clock=clock)


@pytest.fixture()
def strict_service(store, clock):
    return DataService(store, settings=make_settings(strict_integrity=True), clock=clock)


@pytest.fixture()
def sqlite_engine(tmp_path):
    """Temporary SQLite database, disposed at teardown so the file is not left locked."""
    engine = make_engine(f"sqlite:///{tmp_path / 'kv.db'}")
    yield engine
    engine.dispose()


@pytest.fixture()
def startup_data():
    return {
        "email": "founder@startup.io",
        "password": "supersecret",
        "userType": "startup",
        "onboardingComplete": True,
        "startupData": {"official_name": "Acme Labs"},
    }


@pytest.fixture()
def student_data():
    return {
        "email": "student@college.edu",
        "password": "longenough",
        "userType": "student",
        "onboardingComplete": False,
        "studentData": {"college": "BITS Pilani", "skills": ["Python"]},
    }


def internship_payload(startup_id: str, **overrides) -> dict:
    data = {
        "startupId": startup_id,
        "title": "Backend Intern",
        "description": "Build APIs with the platform team.",
        "type": "Full-time",
        "status": "active",
        "duration": "3 months",
        "stipend": "₹20,000/month",
        "skills": ["Python", "SQL"],
        "campus": "Pilani",
        "mode": "Remote",
        "deadline": "2024-12-01",
    }
    data.update(overrides)
    return data


def application_payload(student_id: str, internship_id: str, **overrides) -> dict:
    data = {"studentId": student_id, "internshipId": internship_id, "status": "pending"}
    data.update(overrides)
    return data
