"""
Demo data – populate a ledger with fake hospitals, doctors, patients and records.
"""

import random
from typing import Dict, List, Optional

from faker import Faker

from medledger.config import NO_EXPIRY, RECORD_TYPES
from medledger.ledger import Ledger


def fake_identity(fake: Faker) -> str:
    """Random address-style handle, unique per Faker instance."""
    return fake.unique.hexify(text="0x" + "^" * 40)


def seed_demo_ledger(ledger: Ledger, hospitals: int = 2, doctors_per_hospital: int = 2,
                     patients: int = 5, records_per_patient: int = 1,
                     seed: Optional[int] = None) -> Dict[str, List[str]]:
    """
    Register and vet everyone, grant each patient's hospital unlimited access
    and author records. Returns the identities created, by role.
    """
    fake = Faker()
    if seed is not None:
        fake.seed_instance(seed)
    rng = random.Random(seed)

    created: Dict[str, List[str]] = {"hospital": [], "doctor": [], "patient": []}
    staff: Dict[str, List[str]] = {}

    for _ in range(hospitals):
        hospital = fake_identity(fake)
        ledger.register(hospital, "hospital", f"{fake.last_name()} General Hospital")
        created["hospital"].append(hospital)
        staff[hospital] = []

        for _ in range(doctors_per_hospital):
            doctor = fake_identity(fake)
            ledger.register(doctor, "doctor", f"Dr. {fake.name()}", custodian=hospital)
            ledger.vet_doctor(hospital, doctor)
            created["doctor"].append(doctor)
            staff[hospital].append(doctor)

    for _ in range(patients):
        patient = fake_identity(fake)
        ledger.register(patient, "patient", fake.name())
        created["patient"].append(patient)

        if not created["hospital"]:
            continue
        hospital = rng.choice(created["hospital"])
        ledger.grant_access(patient, hospital, NO_EXPIRY)

        if not staff[hospital]:
            continue
        for _ in range(records_per_patient):
            ledger.add_record(
                rng.choice(staff[hospital]),
                patient,
                fake.sentence(nb_words=8),
                rng.choice(sorted(RECORD_TYPES)),
            )

    return created
