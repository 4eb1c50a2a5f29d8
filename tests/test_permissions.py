"""
Unit tests for the Permission Ledger – grants, revocation and lazy expiry.
"""

import pytest

from conftest import ADMIN, DOCTOR, HOSPITAL, OTHER_HOSPITAL, PATIENT
from medledger.config import NO_EXPIRY
from medledger.errors import (
    InvalidExpiry,
    InvalidHospital,
    InvalidIdentity,
    NoAccess,
    NotAPatient,
    SystemInactive,
    Unauthorized,
)


# ── Tests: grant_access ──────────────────────────────────────────────

def test_grant_with_expiry_lapses_without_revoke(world, clock):
    world.grant_access(PATIENT, HOSPITAL, clock() + 3600)
    assert world.has_access(PATIENT, HOSPITAL)

    clock.advance(3599)
    assert world.has_access(PATIENT, HOSPITAL)

    clock.advance(1)  # exactly at expiry
    assert not world.has_access(PATIENT, HOSPITAL)
    assert world.permission_of(PATIENT, HOSPITAL).active


def test_grant_without_expiry_never_lapses(world, clock):
    world.grant_access(PATIENT, HOSPITAL, NO_EXPIRY)
    clock.advance(10 ** 9)
    assert world.has_access(PATIENT, HOSPITAL)


def test_second_grant_replaces_first(world, clock):
    world.grant_access(PATIENT, HOSPITAL, clock() + 100)
    clock.advance(50)
    world.grant_access(PATIENT, HOSPITAL, NO_EXPIRY)
    clock.advance(1000)
    assert world.has_access(PATIENT, HOSPITAL)

    permission = world.permission_of(PATIENT, HOSPITAL)
    assert permission.granted_at == 1_050
    assert permission.expires_at == NO_EXPIRY


def test_later_grant_can_shorten_access(world, clock):
    world.grant_access(PATIENT, HOSPITAL, NO_EXPIRY)
    world.grant_access(PATIENT, HOSPITAL, clock() + 10)
    clock.advance(10)
    assert not world.has_access(PATIENT, HOSPITAL)


def test_grant_rejects_past_or_present_expiry(world, clock):
    with pytest.raises(InvalidExpiry):
        world.grant_access(PATIENT, HOSPITAL, clock())
    with pytest.raises(InvalidExpiry):
        world.grant_access(PATIENT, HOSPITAL, clock() - 1)
    assert world.permission_of(PATIENT, HOSPITAL) is None


def test_grant_requires_hospital_target(world):
    with pytest.raises(InvalidHospital):
        world.grant_access(PATIENT, DOCTOR)
    with pytest.raises(InvalidHospital):
        world.grant_access(PATIENT, "nowhere")


def test_grant_requires_patient_caller(world):
    with pytest.raises(NotAPatient):
        world.grant_access(DOCTOR, HOSPITAL)
    with pytest.raises(Unauthorized):
        world.grant_access("stranger", HOSPITAL)


def test_grant_blocked_when_system_paused(world):
    world.toggle_system(ADMIN)
    with pytest.raises(SystemInactive):
        world.grant_access(PATIENT, HOSPITAL)


def test_grant_emits_event(world, sink):
    world.grant_access(PATIENT, HOSPITAL, NO_EXPIRY)
    event = sink.of_kind("access_granted")[-1]
    assert event.fields == {"patient": PATIENT, "hospital": HOSPITAL, "expires_at": NO_EXPIRY}


# ── Tests: revoke_access ─────────────────────────────────────────────

def test_revoke_soft_deletes(world):
    world.grant_access(PATIENT, HOSPITAL)
    world.revoke_access(PATIENT, HOSPITAL)
    assert not world.has_access(PATIENT, HOSPITAL)

    permission = world.permission_of(PATIENT, HOSPITAL)
    assert permission is not None
    assert not permission.active


def test_revoke_without_grant_is_harmless(world, sink):
    world.revoke_access(PATIENT, OTHER_HOSPITAL)
    assert not world.has_access(PATIENT, OTHER_HOSPITAL)
    assert sink.of_kind("access_revoked")[-1].fields == {"patient": PATIENT, "hospital": OTHER_HOSPITAL}


def test_revoke_requires_patient_caller(world):
    world.grant_access(PATIENT, HOSPITAL)
    with pytest.raises(Unauthorized):
        world.revoke_access(HOSPITAL, HOSPITAL)
    assert world.has_access(PATIENT, HOSPITAL)


def test_revoke_allowed_while_system_paused(world):
    world.grant_access(PATIENT, HOSPITAL)
    world.toggle_system(ADMIN)
    world.revoke_access(PATIENT, HOSPITAL)
    assert not world.has_access(PATIENT, HOSPITAL)


def test_access_is_per_hospital(world):
    world.grant_access(PATIENT, HOSPITAL)
    assert not world.has_access(PATIENT, OTHER_HOSPITAL)


# ── Tests: handles containing separators ─────────────────────────────

def test_colon_handles_do_not_share_a_grant(ledger):
    ledger.register("c", "hospital", "C")
    ledger.register("b:c", "hospital", "B:C")
    ledger.register("mdoc", "doctor", "Dr. M", custodian="b:c")
    ledger.vet_doctor("b:c", "mdoc")
    ledger.register("a", "patient", "A")
    ledger.register("a:b", "patient", "A:B")

    ledger.grant_access("a:b", "c")

    assert ledger.has_access("a:b", "c")
    assert not ledger.has_access("a", "b:c")
    assert ledger.permission_of("a", "b:c") is None
    with pytest.raises(NoAccess):
        ledger.add_record("mdoc", "a", "planted", "diagnosis")


def test_revoke_rejects_invalid_hospital_handle(world):
    with pytest.raises(InvalidIdentity):
        world.revoke_access(PATIENT, "h" * 500)
    assert world.permission_of(PATIENT, "h" * 500) is None
