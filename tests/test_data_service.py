"""
Repository behaviour against an in-memory store with a frozen clock.
"""
from __future__ import annotations

import pytest

from conftest import application_payload, internship_payload, make_settings
from internlink.domain.entities import Answer, Application, Internship, User
from internlink.domain.identifiers import parse_iso
from internlink.domain.validation import ValidationError
from internlink.repositories.collection_store import (
    APPLICATIONS_KEY,
    INTERNSHIPS_KEY,
    USERS_KEY,
    CollectionStore,
)
from internlink.repositories.kv_store import MemoryKeyValueStore, StorageWriteError
from internlink.services.data_service import (
    DataService,
    DuplicateApplicationError,
    DuplicateEmailError,
    NotFoundError,
    ReferenceIntegrityError,
)


def test_create_user_stamps_id_and_timestamps(service, startup_data, clock):
    user = service.create_user(startup_data)
    assert isinstance(user, User)
    assert user.id.startswith("startup-")
    assert user.created_at == user.updated_at == "2024-09-15T12:00:00.000Z"
    assert parse_iso(user.created_at) == clock.now
    assert user.startup_data == {"official_name": "Acme Labs"}
    assert user.password == "supersecret"


def test_create_user_is_visible_to_next_read(service, student_data):
    user = service.create_user(student_data)
    assert service.get_user_by_id(user.id) == user
    assert service.get_user_by_email("student@college.edu") == user


def test_create_user_ignores_caller_supplied_id_and_timestamps(service, student_data):
    student_data.update({"id": "forged", "createdAt": "1999-01-01T00:00:00.000Z"})
    user = service.create_user(student_data)
    assert user.id != "forged"
    assert user.created_at.startswith("2024-09-15")


def test_create_user_validation_error_writes_nothing(service, store):
    with pytest.raises(ValidationError):
        service.create_user({"email": "no-at-sign", "password": "12345678", "userType": "student"})
    assert store.read(USERS_KEY) == []


def test_create_user_rejects_duplicate_email(service, student_data):
    service.create_user(student_data)
    with pytest.raises(DuplicateEmailError):
        service.create_user(dict(student_data, password="another-one"))
    assert len(service.list_users()) == 1


def test_thousand_creates_yield_distinct_ids(service):
    ids = {
        service.create_application(application_payload("student-x", "internship-y")).id
        for _ in range(1000)
    }
    assert len(ids) == 1000


def test_lookups_on_empty_collections_return_none(service):
    assert service.get_user_by_id("missing") is None
    assert service.get_user_by_email("nobody@example.com") is None
    assert service.get_internship_by_id("missing") is None
    assert service.get_application_by_id("missing") is None
    assert service.get_internships_by_startup_id("S1") == []


def test_get_internships_by_startup_id_keeps_insertion_order(service):
    first = service.create_internship(internship_payload("S1", title="First"))
    service.create_internship(internship_payload("S2", title="Other"))
    third = service.create_internship(internship_payload("S1", title="Third"))

    found = service.get_internships_by_startup_id("S1")
    assert [i.id for i in found] == [first.id, third.id]
    assert [i.title for i in found] == ["First", "Third"]


def test_create_internship_keeps_descriptive_fields(service):
    internship = service.create_internship(internship_payload("S1", questions=["Why us?"]))
    stored = service.get_internship_by_id(internship.id)
    assert isinstance(stored, Internship)
    assert stored.id.startswith("internship-")
    assert stored.campus == "Pilani"
    assert stored.mode == "Remote"
    assert stored.skills == ["Python", "SQL"]
    assert stored.questions == ["Why us?"]


def test_create_internship_normalizes_legacy_open_status(service, store):
    internship = service.create_internship(internship_payload("S1", status="open"))
    assert internship.status == "active"
    assert store.read(INTERNSHIPS_KEY)[0]["status"] == "active"


def test_create_internship_rejects_invalid_type(service):
    with pytest.raises(ValidationError, match="Invalid internship type"):
        service.create_internship(internship_payload("S1", type="Weekend"))


def test_create_application_with_answers(service):
    application = service.create_application(
        application_payload(
            "student-1",
            "internship-1",
            coverLetter="Hello",
            answers=[{"question": "Why?", "answer": "Because"}, {"question": "When?", "answer": "Now"}],
        )
    )
    stored = service.get_application_by_id(application.id)
    assert isinstance(stored, Application)
    assert stored.id.startswith("application-")
    assert stored.cover_letter == "Hello"
    assert stored.answers == [Answer("Why?", "Because"), Answer("When?", "Now")]


def test_create_application_rejects_malformed_answers(service, store):
    with pytest.raises(ValidationError, match="Answers must be a list"):
        service.create_application(application_payload("student-1", "internship-1", answers=["x"]))
    assert store.read(APPLICATIONS_KEY) == []


def test_application_without_answers_is_stored_without_the_key(service, store):
    application = service.create_application(application_payload("student-1", "internship-1"))
    service.update_application(application.id, {"status": "accepted"})
    assert "answers" not in store.read(APPLICATIONS_KEY)[0]


def test_entities_accepted_as_input(service, student_data):
    user = service.create_user(User.from_dict(student_data))
    assert user.email == "student@college.edu"


def test_unknown_stored_keys_survive_updates(service, store):
    store.write(INTERNSHIPS_KEY, [
        {
            "id": "legacy-1",
            "startupId": "S1",
            "title": "Legacy",
            "description": "Old record",
            "type": "Part-time",
            "status": "open",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:00.000Z",
            "customFlag": True,
        }
    ])
    updated = service.update_internship("legacy-1", {"title": "Renamed"})
    assert updated.status == "active"
    raw = store.read(INTERNSHIPS_KEY)[0]
    assert raw["customFlag"] is True
    assert raw["title"] == "Renamed"
    assert "skills" not in raw
    assert "questions" not in raw


def test_update_user_merges_and_bumps_updated_at(service, student_data, clock):
    user = service.create_user(student_data)
    clock.advance(hours=1)
    updated = service.update_user(user.id, {"onboardingComplete": True, "id": "hijack", "createdAt": "x"})
    assert updated.id == user.id
    assert updated.onboarding_complete is True
    assert updated.created_at == user.created_at
    assert updated.updated_at == "2024-09-15T13:00:00.000Z"
    assert service.get_user_by_id(user.id) == updated


def test_update_user_validates_merged_record(service, student_data):
    user = service.create_user(student_data)
    with pytest.raises(ValidationError):
        service.update_user(user.id, {"password": "short"})
    assert service.get_user_by_id(user.id).password == "longenough"


def test_update_user_cannot_take_another_email(service, student_data, startup_data):
    student = service.create_user(student_data)
    service.create_user(startup_data)
    with pytest.raises(DuplicateEmailError):
        service.update_user(student.id, {"email": "founder@startup.io"})
    # keeping one's own email is fine
    assert service.update_user(student.id, {"email": "student@college.edu"}) is not None


def test_update_of_unknown_id_is_silent_noop(service, store):
    assert service.update_user("missing", {"name": "x"}) is None
    assert service.update_internship("missing", {"title": "x"}) is None
    assert service.update_application("missing", {"status": "accepted"}) is None
    assert store.read(USERS_KEY) == []


def test_update_application_status(service):
    application = service.create_application(application_payload("s1", "i1"))
    updated = service.update_application(application.id, {"status": "waitlisted"})
    assert updated.status == "waitlisted"
    with pytest.raises(ValidationError):
        service.update_application(application.id, {"status": "hired"})


def test_list_and_filter_queries(service, student_data, startup_data):
    student = service.create_user(student_data)
    startup = service.create_user(startup_data)
    mine = service.create_internship(internship_payload(startup.id))
    other = service.create_internship(internship_payload("someone-else"))
    a1 = service.create_application(application_payload(student.id, mine.id))
    a2 = service.create_application(application_payload(student.id, other.id))
    a3 = service.create_application(application_payload("student-2", mine.id))

    assert [u.id for u in service.list_startups()] == [startup.id]
    assert [u.id for u in service.list_students()] == [student.id]
    assert len(service.list_internships()) == 2
    assert [a.id for a in service.get_applications_by_student_id(student.id)] == [a1.id, a2.id]
    assert [a.id for a in service.get_applications_by_internship_id(mine.id)] == [a1.id, a3.id]
    assert [a.id for a in service.get_applications_by_startup_id(startup.id)] == [a1.id, a3.id]
    assert len(service.list_applications()) == 3


def test_authenticate_plaintext(service, student_data):
    user = service.create_user(student_data)
    assert service.authenticate("student@college.edu", "longenough") == user
    assert service.authenticate("student@college.edu", "wrong-password") is None
    assert service.authenticate("ghost@college.edu", "longenough") is None


def test_hashed_passwords_are_stored_and_verified(store, clock, student_data):
    svc = DataService(store, settings=make_settings(hash_passwords=True), clock=clock)
    user = svc.create_user(student_data)
    assert user.password.startswith("argon2$")
    assert "longenough" not in store.backend.get_item(USERS_KEY)
    assert svc.authenticate("student@college.edu", "longenough") is not None

    svc.update_user(user.id, {"password": "brand-new-secret"})
    assert svc.authenticate("student@college.edu", "brand-new-secret") is not None
    assert svc.authenticate("student@college.edu", "longenough") is None

    svc.update_user(user.id, {"name": "Ana"})
    assert svc.authenticate("student@college.edu", "brand-new-secret") is not None


def test_storage_failure_surfaces_to_caller(clock, settings, student_data):
    store = CollectionStore(MemoryKeyValueStore(quota_bytes=60))
    store.initialize()
    svc = DataService(store, settings=settings, clock=clock)
    with pytest.raises(StorageWriteError):
        svc.create_user(student_data)
    assert store.read(USERS_KEY) == []


# ---------------------------------------------------------------------------
# strict integrity mode
# ---------------------------------------------------------------------------

def test_default_mode_accepts_dangling_references(service):
    internship = service.create_internship(internship_payload("no-such-startup"))
    application = service.create_application(application_payload("no-such-student", internship.id))
    assert application.internship_id == internship.id


def test_strict_mode_requires_existing_startup(strict_service, student_data):
    student = strict_service.create_user(student_data)
    with pytest.raises(ReferenceIntegrityError):
        strict_service.create_internship(internship_payload("no-such-startup"))
    with pytest.raises(ReferenceIntegrityError, match="is not a startup"):
        strict_service.create_internship(internship_payload(student.id))


def test_strict_mode_application_checks(strict_service, student_data, startup_data):
    student = strict_service.create_user(student_data)
    startup = strict_service.create_user(startup_data)
    internship = strict_service.create_internship(internship_payload(startup.id))

    with pytest.raises(ReferenceIntegrityError):
        strict_service.create_application(application_payload(startup.id, internship.id))
    with pytest.raises(ReferenceIntegrityError):
        strict_service.create_application(application_payload(student.id, "internship-missing"))

    application = strict_service.create_application(application_payload(student.id, internship.id))
    with pytest.raises(DuplicateApplicationError):
        strict_service.create_application(application_payload(student.id, internship.id))

    # status-only updates skip the reference checks and do not trip the pair check
    assert strict_service.update_application(application.id, {"status": "accepted"}).status == "accepted"
    assert len(strict_service.store.read(APPLICATIONS_KEY)) == 1


def test_strict_mode_update_of_unknown_id_raises(strict_service):
    with pytest.raises(NotFoundError) as exc_info:
        strict_service.update_internship("missing", {"title": "x"})
    assert exc_info.value.kind == "internship"
