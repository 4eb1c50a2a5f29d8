"""
Record Store – medical records, the id counter and the per-patient index.
"""

from typing import List

from medledger.config import RECORD_TYPES
from medledger.errors import InvalidRecordType, NoAccess, NotAPatient, NotFound, Unauthorized
from medledger.models import LedgerEvent, MedicalRecord, UserProfile
from medledger.permissions import has_access
from medledger.rbac import is_doctor_caller, require_doctor, require_patient
from medledger.registry import load_profile
from medledger.storage import Transaction

COUNTER_KEY = "counter:records"


def record_key(record_id: int) -> str:
    return f"record:{record_id}"


def index_key(patient: str) -> str:
    return f"patient_records:{patient}"


def next_record_id(tx: Transaction) -> int:
    """Ids start at 1; 0 never names a record."""
    return tx.get(COUNTER_KEY, 1)


def record_count(tx: Transaction) -> int:
    return next_record_id(tx) - 1


def load_record(tx: Transaction, record_id: int) -> MedicalRecord:
    data = tx.get(record_key(record_id)) if record_id > 0 else None
    if data is None:
        raise NotFound(f"Record {record_id} does not exist.")
    return MedicalRecord.from_dict(data)


def index_of(tx: Transaction, patient: str) -> List[int]:
    return tx.get(index_key(patient), [])


def can_read(tx: Transaction, caller: UserProfile, patient: str, now: int) -> bool:
    """The patient themself, or a practicing doctor whose hospital holds live access."""
    if caller.identity == patient:
        return True
    return is_doctor_caller(caller) and has_access(tx, patient, caller.custodian, now)


# ── Mutations ────────────────────────────────────────────────────────

def add_record(tx: Transaction, caller: str, patient: str, data: str,
               record_type: str, now: int) -> int:
    doctor = load_profile(tx, caller)
    require_doctor(doctor)

    record_type = str(record_type).strip().lower()
    if record_type not in RECORD_TYPES:
        raise InvalidRecordType(f"Unsupported record type '{record_type}'.")

    if load_profile(tx, patient).role != "patient":
        raise NotAPatient(f"{patient} is not a registered patient.")
    if not has_access(tx, patient, doctor.custodian, now):
        raise NoAccess(f"Hospital {doctor.custodian} has no live access to {patient}.")

    record_id = next_record_id(tx)
    record = MedicalRecord(record_id=record_id, patient=patient, doctor=caller,
                           hospital=doctor.custodian, data=data, created_at=now,
                           record_type=record_type)
    tx.put(record_key(record_id), record.to_dict())
    tx.put(COUNTER_KEY, record_id + 1)
    tx.put(index_key(patient), index_of(tx, patient) + [record_id])
    tx.emit(LedgerEvent("record_added", now, {
        "record_id": record_id, "patient": patient,
        "doctor": caller, "hospital": doctor.custodian,
    }))
    return record_id


def update_record(tx: Transaction, caller: str, record_id: int, data: str) -> None:
    """Only the authoring doctor may replace the payload; access grants are not consulted."""
    require_doctor(load_profile(tx, caller))

    record = load_record(tx, record_id)
    if record.doctor != caller:
        raise Unauthorized(f"Only the authoring doctor may update record {record_id}.")

    record.data = data
    tx.put(record_key(record_id), record.to_dict())


# ── Reads ────────────────────────────────────────────────────────────

def get_record(tx: Transaction, caller: str, record_id: int, now: int) -> MedicalRecord:
    record = load_record(tx, record_id)
    if not can_read(tx, load_profile(tx, caller), record.patient, now):
        raise Unauthorized(f"{caller} may not read record {record_id}.")
    return record


def records_of(tx: Transaction, caller: str, patient: str, now: int) -> List[int]:
    if not can_read(tx, load_profile(tx, caller), patient, now):
        raise Unauthorized(f"{caller} may not list records of {patient}.")
    return index_of(tx, patient)


def my_records(tx: Transaction, caller: str) -> List[int]:
    require_patient(load_profile(tx, caller))
    return index_of(tx, caller)
