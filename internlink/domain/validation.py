"""
Input validation for users, internships and applications.

Each validator stops at the first failing rule and raises ValidationError
with a message naming that rule. Cross-entity references are not checked
here; see DataService for the optional integrity checks.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .entities import (
    APPLICATION_STATUSES,
    INTERNSHIP_STATUS_ALIASES,
    INTERNSHIP_STATUSES,
    INTERNSHIP_TYPES,
    USER_TYPE_STARTUP,
    USER_TYPE_STUDENT,
    USER_TYPES,
    Answer,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


class ValidationError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def is_valid_email(value: str | None) -> bool:
    return bool(value) and isinstance(value, str) and bool(EMAIL_PATTERN.search(value))


def normalize_internship_status(value: Any) -> Any:
    """Map legacy status spellings onto the canonical set."""
    if isinstance(value, str):
        return INTERNSHIP_STATUS_ALIASES.get(value, value)
    return value


def validate_user(user: Mapping[str, Any]) -> None:
    if not is_valid_email(user.get("email")):
        raise ValidationError("Invalid email format")
    if len(_text(user.get("password"))) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    user_type = user.get("userType")
    if user_type not in USER_TYPES:
        raise ValidationError("Invalid user type")
    if user_type == USER_TYPE_STUDENT and user.get("startupData"):
        raise ValidationError("Profile data does not match user type")
    if user_type == USER_TYPE_STARTUP and user.get("studentData"):
        raise ValidationError("Profile data does not match user type")


def validate_internship(internship: Mapping[str, Any]) -> None:
    if not _text(internship.get("title")).strip():
        raise ValidationError("Internship title is required")
    if not _text(internship.get("description")).strip():
        raise ValidationError("Internship description is required")
    if not internship.get("startupId"):
        raise ValidationError("Startup ID is required")
    if internship.get("type") not in INTERNSHIP_TYPES:
        raise ValidationError("Invalid internship type")
    if normalize_internship_status(internship.get("status")) not in INTERNSHIP_STATUSES:
        raise ValidationError("Invalid internship status")


def validate_application(application: Mapping[str, Any]) -> None:
    if not application.get("studentId"):
        raise ValidationError("Student ID is required")
    if not application.get("internshipId"):
        raise ValidationError("Internship ID is required")
    if application.get("status") not in APPLICATION_STATUSES:
        raise ValidationError("Invalid application status")
    answers = application.get("answers")
    if answers is None:
        return
    if not isinstance(answers, (list, tuple)) or not all(isinstance(a, (Answer, Mapping)) for a in answers):
        raise ValidationError("Answers must be a list of question/answer pairs")
