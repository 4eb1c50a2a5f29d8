"""
Unit tests for the Record Store.
"""

import pytest

from conftest import ADMIN, COLLEAGUE, DOCTOR, HOSPITAL, OTHER_HOSPITAL, PATIENT
from medledger.errors import (
    InvalidRecordType,
    NoAccess,
    NotAPatient,
    NotFound,
    SystemInactive,
    Unauthorized,
)


@pytest.fixture
def granted(world):
    world.grant_access(PATIENT, HOSPITAL)
    return world


# ── Tests: add_record ────────────────────────────────────────────────

def test_add_record_requires_hospital_access(world):
    with pytest.raises(NoAccess):
        world.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    world.grant_access(PATIENT, HOSPITAL)
    assert world.add_record(DOCTOR, PATIENT, "x", "diagnosis") == 1


def test_record_ids_increment_across_failures(granted):
    assert granted.add_record(DOCTOR, PATIENT, "a", "diagnosis") == 1
    with pytest.raises(NotAPatient):
        granted.add_record(DOCTOR, HOSPITAL, "b", "diagnosis")
    with pytest.raises(InvalidRecordType):
        granted.add_record(DOCTOR, PATIENT, "b", "prescription")
    assert granted.add_record(COLLEAGUE, PATIENT, "c", "surgery") == 2
    assert granted.record_count() == 2
    assert granted.my_records(PATIENT) == [1, 2]


def test_add_record_captures_custodian_hospital(granted, clock):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "Examination")
    record = granted.get_record(PATIENT, record_id)
    assert record.hospital == HOSPITAL
    assert record.doctor == DOCTOR
    assert record.record_type == "examination"
    assert record.created_at == clock()


def test_add_record_requires_practicing_doctor(granted):
    granted.register("rookie", "doctor", "Dr. New", custodian=HOSPITAL)
    with pytest.raises(Unauthorized, match="not been vetted"):
        granted.add_record("rookie", PATIENT, "x", "diagnosis")

    granted.suspend_doctor(HOSPITAL, DOCTOR)
    with pytest.raises(Unauthorized, match="suspended"):
        granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")

    with pytest.raises(Unauthorized):
        granted.add_record(HOSPITAL, PATIENT, "x", "diagnosis")
    assert granted.record_count() == 0


def test_add_record_access_lapses_with_expiry(world, clock):
    world.grant_access(PATIENT, HOSPITAL, clock() + 60)
    world.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    clock.advance(60)
    with pytest.raises(NoAccess):
        world.add_record(DOCTOR, PATIENT, "y", "diagnosis")


def test_add_record_blocked_when_paused(granted):
    granted.toggle_system(ADMIN)
    with pytest.raises(SystemInactive):
        granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")


def test_add_record_emits_event(granted, sink):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "treatment")
    assert sink.of_kind("record_added")[-1].fields == {
        "record_id": record_id, "patient": PATIENT, "doctor": DOCTOR, "hospital": HOSPITAL,
    }


# ── Tests: update_record ─────────────────────────────────────────────

def test_update_only_by_author(granted):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    for intruder in (COLLEAGUE, PATIENT, HOSPITAL, ADMIN):
        with pytest.raises(Unauthorized):
            granted.update_record(intruder, record_id, "tampered")
    assert granted.get_record(PATIENT, record_id).data == "x"


def test_update_keeps_other_fields(granted, clock):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    created = granted.get_record(PATIENT, record_id)
    clock.advance(500)
    granted.update_record(DOCTOR, record_id, "y")
    updated = granted.get_record(PATIENT, record_id)
    assert updated.data == "y"
    assert updated.created_at == created.created_at
    assert updated.record_type == created.record_type


def test_update_after_revoke_still_allowed(granted):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    granted.revoke_access(PATIENT, HOSPITAL)
    granted.update_record(DOCTOR, record_id, "y")
    assert granted.get_record(PATIENT, record_id).data == "y"


def test_update_unknown_record(granted):
    with pytest.raises(NotFound):
        granted.update_record(DOCTOR, 42, "y")
    with pytest.raises(NotFound):
        granted.update_record(DOCTOR, 0, "y")


def test_update_blocked_when_paused(granted):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    granted.toggle_system(ADMIN)
    with pytest.raises(SystemInactive):
        granted.update_record(DOCTOR, record_id, "y")


# ── Tests: reads ─────────────────────────────────────────────────────

def test_colleague_reads_once_hospital_has_access(granted):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    assert granted.get_record(COLLEAGUE, record_id).data == "x"
    assert granted.records_of(COLLEAGUE, PATIENT) == [record_id]


def test_reads_denied_without_access(granted):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    granted.register("outsider", "doctor", "Dr. Out", custodian=OTHER_HOSPITAL)
    granted.vet_doctor(OTHER_HOSPITAL, "outsider")
    with pytest.raises(Unauthorized):
        granted.get_record("outsider", record_id)
    with pytest.raises(Unauthorized):
        granted.records_of("outsider", PATIENT)
    with pytest.raises(Unauthorized):
        granted.get_record(HOSPITAL, record_id)


def test_author_loses_read_after_revoke_patient_keeps_it(granted):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    granted.revoke_access(PATIENT, HOSPITAL)
    with pytest.raises(Unauthorized):
        granted.get_record(DOCTOR, record_id)
    assert granted.get_record(PATIENT, record_id).data == "x"


def test_get_unknown_record(granted):
    with pytest.raises(NotFound):
        granted.get_record(PATIENT, 1)


def test_reads_allowed_while_paused(granted):
    record_id = granted.add_record(DOCTOR, PATIENT, "x", "diagnosis")
    granted.toggle_system(ADMIN)
    assert granted.get_record(PATIENT, record_id).data == "x"
    assert granted.my_records(PATIENT) == [record_id]


def test_my_records_requires_patient(granted):
    with pytest.raises(NotAPatient):
        granted.my_records(DOCTOR)
    assert granted.my_records(PATIENT) == []
