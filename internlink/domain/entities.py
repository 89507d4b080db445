"""
Typed records for the three entity kinds.

Stored documents use camelCase keys; the dataclasses expose snake_case
attributes. Keys a record does not know about are kept in `extra` so that a
read-modify-write cycle never drops data written by other code.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

USER_TYPE_STUDENT = "student"
USER_TYPE_STARTUP = "startup"
USER_TYPES = frozenset({USER_TYPE_STUDENT, USER_TYPE_STARTUP})

INTERNSHIP_TYPES = frozenset({"Full-time", "Part-time"})

INTERNSHIP_STATUS_ACTIVE = "active"
INTERNSHIP_STATUS_CLOSED = "closed"
INTERNSHIP_STATUSES = frozenset({INTERNSHIP_STATUS_ACTIVE, INTERNSHIP_STATUS_CLOSED})
# older dashboard code toggled internships between "open" and "closed"
INTERNSHIP_STATUS_ALIASES = {"open": INTERNSHIP_STATUS_ACTIVE}

APPLICATION_STATUS_PENDING = "pending"
APPLICATION_STATUSES = frozenset({APPLICATION_STATUS_PENDING, "accepted", "rejected", "waitlisted"})

BASE_KEYS = ("id", "createdAt", "updatedAt")


@dataclass
class _Record:
    """Shared camelCase <-> snake_case mapping."""

    _KEYS: ClassVar[dict[str, str]] = {}
    _OPTIONAL: ClassVar[frozenset[str]] = frozenset()
    # list fields left out of the stored document while empty
    _LISTS: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        kwargs: dict[str, Any] = {}
        known = set(cls._KEYS.values())
        for attr, key in cls._KEYS.items():
            if key in data:
                kwargs[attr] = data[key]
        kwargs["extra"] = {k: v for k, v in data.items() if k not in known}
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out = dict(self.extra)
        for attr, key in self._KEYS.items():
            value = getattr(self, attr)
            if value is None and attr in self._OPTIONAL:
                continue
            if not value and attr in self._LISTS:
                continue
            out[key] = value
        return out


@dataclass
class User(_Record):
    id: str = ""
    email: str = ""
    password: str = ""
    user_type: str = ""
    onboarding_complete: bool = False
    created_at: str = ""
    updated_at: str = ""
    name: Optional[str] = None
    student_data: Optional[dict] = None
    startup_data: Optional[dict] = None
    extra: dict = field(default_factory=dict, repr=False)

    _KEYS: ClassVar[dict[str, str]] = {
        "id": "id",
        "email": "email",
        "password": "password",
        "user_type": "userType",
        "onboarding_complete": "onboardingComplete",
        "created_at": "createdAt",
        "updated_at": "updatedAt",
        "name": "name",
        "student_data": "studentData",
        "startup_data": "startupData",
    }
    _OPTIONAL: ClassVar[frozenset[str]] = frozenset({"name", "student_data", "startup_data"})

    @property
    def is_startup(self) -> bool:
        return self.user_type == USER_TYPE_STARTUP

    @property
    def is_student(self) -> bool:
        return self.user_type == USER_TYPE_STUDENT


@dataclass
class Internship(_Record):
    id: str = ""
    startup_id: str = ""
    title: str = ""
    description: str = ""
    type: str = ""
    status: str = ""
    created_at: str = ""
    updated_at: str = ""
    location: Optional[str] = None
    duration: Optional[str] = None
    stipend: Optional[str] = None
    skills: list = field(default_factory=list)
    industry: Optional[str] = None
    campus: Optional[str] = None
    mode: Optional[str] = None
    deadline: Optional[str] = None
    questions: list = field(default_factory=list)
    extra: dict = field(default_factory=dict, repr=False)

    _KEYS: ClassVar[dict[str, str]] = {
        "id": "id",
        "startup_id": "startupId",
        "title": "title",
        "description": "description",
        "type": "type",
        "status": "status",
        "created_at": "createdAt",
        "updated_at": "updatedAt",
        "location": "location",
        "duration": "duration",
        "stipend": "stipend",
        "skills": "skills",
        "industry": "industry",
        "campus": "campus",
        "mode": "mode",
        "deadline": "deadline",
        "questions": "questions",
    }
    _OPTIONAL: ClassVar[frozenset[str]] = frozenset(
        {"location", "duration", "stipend", "industry", "campus", "mode", "deadline"}
    )
    _LISTS: ClassVar[frozenset[str]] = frozenset({"skills", "questions"})


@dataclass
class Answer:
    question: str = ""
    answer: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Answer":
        return cls(question=str(data.get("question") or ""), answer=str(data.get("answer") or ""))

    def to_dict(self) -> dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass
class Application(_Record):
    id: str = ""
    student_id: str = ""
    internship_id: str = ""
    status: str = ""
    created_at: str = ""
    updated_at: str = ""
    cover_letter: Optional[str] = None
    resume: Optional[str] = None
    answers: list[Answer] = field(default_factory=list)
    extra: dict = field(default_factory=dict, repr=False)

    _KEYS: ClassVar[dict[str, str]] = {
        "id": "id",
        "student_id": "studentId",
        "internship_id": "internshipId",
        "status": "status",
        "created_at": "createdAt",
        "updated_at": "updatedAt",
        "cover_letter": "coverLetter",
        "resume": "resume",
        "answers": "answers",
    }
    _OPTIONAL: ClassVar[frozenset[str]] = frozenset({"cover_letter", "resume"})
    _LISTS: ClassVar[frozenset[str]] = frozenset({"answers"})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Application":
        record = super().from_dict(data)
        record.answers = [
            a if isinstance(a, Answer) else Answer.from_dict(a)
            for a in (record.answers or [])
            if isinstance(a, (Answer, Mapping))
        ]
        return record

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.answers:
            out["answers"] = [a.to_dict() for a in self.answers]
        return out
