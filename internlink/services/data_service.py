"""
Entity repository for users, internships and applications.

All operations read the whole collection from the CollectionStore, work on it
in memory and write it back, so a read issued after a write in the same
process always observes that write.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Optional, Type

from internlink.core.config import Settings, get_settings
from internlink.core.security import hash_password, is_hashed, verify_password
from internlink.domain.entities import (
    BASE_KEYS,
    USER_TYPE_STARTUP,
    USER_TYPE_STUDENT,
    Application,
    Internship,
    User,
)
from internlink.domain.identifiers import generate_id, prefix_for, timestamp_pair, to_iso, utcnow
from internlink.domain.validation import (
    normalize_internship_status,
    validate_application,
    validate_internship,
    validate_user,
)
from internlink.repositories.collection_store import (
    APPLICATIONS_KEY,
    INTERNSHIPS_KEY,
    USERS_KEY,
    CollectionStore,
)

logger = logging.getLogger(__name__)


class DataServiceError(Exception):
    """Base class for repository-level errors."""


class DuplicateEmailError(DataServiceError):
    def __init__(self, email: str):
        super().__init__(f"A user with email {email} already exists")
        self.email = email


class DuplicateApplicationError(DataServiceError):
    def __init__(self, student_id: str, internship_id: str):
        super().__init__(f"Student {student_id} already applied to internship {internship_id}")
        self.student_id = student_id
        self.internship_id = internship_id


class NotFoundError(DataServiceError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class ReferenceIntegrityError(DataServiceError):
    """Raised when a record points at a missing or wrong-kind record."""


def _payload(data: Any) -> dict[str, Any]:
    if hasattr(data, "to_dict"):
        data = data.to_dict()
    if not isinstance(data, Mapping):
        raise TypeError(f"Expected a mapping of fields, got {type(data).__name__}")
    return dict(data)


class DataService:
    """CRUD and query operations over the three collections."""

    def __init__(
        self,
        store: CollectionStore,
        *,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
        strict_integrity: Optional[bool] = None,
        hash_passwords: Optional[bool] = None,
    ) -> None:
        settings = settings or get_settings()
        self.store = store
        self.clock = clock or utcnow
        self.strict_integrity = settings.strict_integrity if strict_integrity is None else strict_integrity
        self.hash_passwords = settings.hash_passwords if hash_passwords is None else hash_passwords

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return self.clock()

    def _stamp(self, kind: str, data: Mapping[str, Any]) -> dict[str, Any]:
        now = self._now()
        record = {k: v for k, v in data.items() if k not in BASE_KEYS}
        created_at, updated_at = timestamp_pair(now)
        record["id"] = generate_id(prefix_for(kind, record), now)
        record["createdAt"] = created_at
        record["updatedAt"] = updated_at
        return record

    def _find(self, key: str, record_id: str) -> Optional[dict[str, Any]]:
        for item in self.store.read(key):
            if item.get("id") == record_id:
                return item
        return None

    def _require_user(self, user_id: str, user_type: str, label: str) -> None:
        user = self._find(USERS_KEY, user_id)
        if user is None:
            raise ReferenceIntegrityError(f"{label} {user_id} does not exist")
        if user.get("userType") != user_type:
            raise ReferenceIntegrityError(f"{label} {user_id} is not a {user_type}")

    def _check_email_free(self, users: list[dict[str, Any]], email: str, own_id: str | None = None) -> None:
        for user in users:
            if user.get("email") == email and user.get("id") != own_id:
                raise DuplicateEmailError(email)

    def _update(
        self,
        key: str,
        kind: str,
        entity_cls: Type,
        record_id: str,
        changes: Any,
        prepare: Callable[[list[dict[str, Any]], dict[str, Any], dict[str, Any]], None],
    ):
        items = self.store.read(key)
        for index, item in enumerate(items):
            if item.get("id") != record_id:
                continue
            updates = {k: v for k, v in _payload(changes).items() if k not in BASE_KEYS}
            merged = {**item, **updates}
            merged["id"] = item["id"]
            merged["createdAt"] = item.get("createdAt")
            merged["updatedAt"] = to_iso(self._now())
            prepare(items, merged, updates)
            entity = entity_cls.from_dict(merged)
            items[index] = entity.to_dict()
            self.store.write(key, items)
            return entity
        if self.strict_integrity:
            raise NotFoundError(kind, record_id)
        logger.debug("Ignoring update of unknown %s %s", kind, record_id)
        return None

    # -------------------------------------- users --------------------------------------
    def create_user(self, data: Any) -> User:
        payload = _payload(data)
        validate_user(payload)
        users = self.store.read(USERS_KEY)
        self._check_email_free(users, payload["email"])
        if self.hash_passwords:
            payload["password"] = hash_password(payload["password"])
        user = User.from_dict(self._stamp("user", payload))
        users.append(user.to_dict())
        self.store.write(USERS_KEY, users)
        return user

    def update_user(self, user_id: str, changes: Any) -> Optional[User]:
        def prepare(users, merged, updates):
            validate_user(merged)
            self._check_email_free(users, merged["email"], own_id=user_id)
            if self.hash_passwords and "password" in updates and not is_hashed(merged["password"]):
                merged["password"] = hash_password(merged["password"])

        return self._update(USERS_KEY, "user", User, user_id, changes, prepare)

    def get_user_by_email(self, email: str) -> Optional[User]:
        for item in self.store.read(USERS_KEY):
            if item.get("email") == email:
                return User.from_dict(item)
        return None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        item = self._find(USERS_KEY, user_id)
        return User.from_dict(item) if item is not None else None

    def list_users(self) -> list[User]:
        return [User.from_dict(item) for item in self.store.read(USERS_KEY)]

    def list_startups(self) -> list[User]:
        return [u for u in self.list_users() if u.is_startup]

    def list_students(self) -> list[User]:
        return [u for u in self.list_users() if u.is_student]

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.get_user_by_email((email or "").strip())
        if user and verify_password(password, user.password):
            return user
        return None

    # -------------------------------------- internships --------------------------------------
    def create_internship(self, data: Any) -> Internship:
        payload = _payload(data)
        payload["status"] = normalize_internship_status(payload.get("status"))
        validate_internship(payload)
        if self.strict_integrity:
            self._require_user(payload["startupId"], USER_TYPE_STARTUP, "Startup")
        internships = self.store.read(INTERNSHIPS_KEY)
        internship = Internship.from_dict(self._stamp("internship", payload))
        internships.append(internship.to_dict())
        self.store.write(INTERNSHIPS_KEY, internships)
        return internship

    def update_internship(self, internship_id: str, changes: Any) -> Optional[Internship]:
        def prepare(_items, merged, updates):
            merged["status"] = normalize_internship_status(merged.get("status"))
            validate_internship(merged)
            if self.strict_integrity and "startupId" in updates:
                self._require_user(merged["startupId"], USER_TYPE_STARTUP, "Startup")

        return self._update(INTERNSHIPS_KEY, "internship", Internship, internship_id, changes, prepare)

    def get_internship_by_id(self, internship_id: str) -> Optional[Internship]:
        item = self._find(INTERNSHIPS_KEY, internship_id)
        return Internship.from_dict(item) if item is not None else None

    def get_internships_by_startup_id(self, startup_id: str) -> list[Internship]:
        return [
            Internship.from_dict(item)
            for item in self.store.read(INTERNSHIPS_KEY)
            if item.get("startupId") == startup_id
        ]

    def list_internships(self) -> list[Internship]:
        return [Internship.from_dict(item) for item in self.store.read(INTERNSHIPS_KEY)]

    # -------------------------------------- applications --------------------------------------
    def _check_application_refs(self, applications: list[dict[str, Any]], record: Mapping[str, Any], own_id: str | None = None) -> None:
        self._require_user(record["studentId"], USER_TYPE_STUDENT, "Student")
        if self._find(INTERNSHIPS_KEY, record["internshipId"]) is None:
            raise ReferenceIntegrityError(f"Internship {record['internshipId']} does not exist")
        for app in applications:
            if (
                app.get("studentId") == record["studentId"]
                and app.get("internshipId") == record["internshipId"]
                and app.get("id") != own_id
            ):
                raise DuplicateApplicationError(record["studentId"], record["internshipId"])

    def create_application(self, data: Any) -> Application:
        payload = _payload(data)
        validate_application(payload)
        applications = self.store.read(APPLICATIONS_KEY)
        if self.strict_integrity:
            self._check_application_refs(applications, payload)
        application = Application.from_dict(self._stamp("application", payload))
        applications.append(application.to_dict())
        self.store.write(APPLICATIONS_KEY, applications)
        return application

    def update_application(self, application_id: str, changes: Any) -> Optional[Application]:
        def prepare(applications, merged, updates):
            validate_application(merged)
            if self.strict_integrity and ({"studentId", "internshipId"} & set(updates)):
                self._check_application_refs(applications, merged, own_id=application_id)

        return self._update(APPLICATIONS_KEY, "application", Application, application_id, changes, prepare)

    def get_application_by_id(self, application_id: str) -> Optional[Application]:
        item = self._find(APPLICATIONS_KEY, application_id)
        return Application.from_dict(item) if item is not None else None

    def list_applications(self) -> list[Application]:
        return [Application.from_dict(item) for item in self.store.read(APPLICATIONS_KEY)]

    def get_applications_by_student_id(self, student_id: str) -> list[Application]:
        return [a for a in self.list_applications() if a.student_id == student_id]

    def get_applications_by_internship_id(self, internship_id: str) -> list[Application]:
        return [a for a in self.list_applications() if a.internship_id == internship_id]

    def get_applications_by_startup_id(self, startup_id: str) -> list[Application]:
        internship_ids = {i.id for i in self.get_internships_by_startup_id(startup_id)}
        return [a for a in self.list_applications() if a.internship_id in internship_ids]
