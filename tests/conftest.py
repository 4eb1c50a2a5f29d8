"""
Shared fixtures: a ledger on a manual clock with an in-memory event sink.
"""

import pytest

from medledger.clock import ManualClock
from medledger.events import MemoryEventSink
from medledger.ledger import Ledger
from medledger.storage import MemoryStore

ADMIN = "admin"
HOSPITAL = "hospital-1"
OTHER_HOSPITAL = "hospital-2"
DOCTOR = "doctor-1"
COLLEAGUE = "doctor-2"
PATIENT = "patient-1"


@pytest.fixture
def clock():
    return ManualClock(now=1_000)


@pytest.fixture
def sink():
    return MemoryEventSink()


@pytest.fixture
def ledger(clock, sink):
    return Ledger(store=MemoryStore(), clock=clock, sink=sink, deployer=ADMIN)


@pytest.fixture
def world(ledger):
    """Two hospitals, two vetted doctors at HOSPITAL, one patient."""
    ledger.register(HOSPITAL, "hospital", "St. Mary")
    ledger.register(OTHER_HOSPITAL, "hospital", "General")
    ledger.register(DOCTOR, "doctor", "Dr. House", custodian=HOSPITAL)
    ledger.register(COLLEAGUE, "doctor", "Dr. Wilson", custodian=HOSPITAL)
    ledger.register(PATIENT, "patient", "Alice")
    ledger.vet_doctor(HOSPITAL, DOCTOR)
    ledger.vet_doctor(HOSPITAL, COLLEAGUE)
    return ledger
