"""
Hospital Roster – vetting and suspension of a hospital's doctors.
"""

from typing import Dict, List

from medledger.errors import NotAMember, Unauthorized
from medledger.rbac import require_hospital
from medledger.registry import load_profile, save_profile
from medledger.storage import Transaction


def roster_key(hospital: str) -> str:
    return f"roster:{hospital}"


def roster_of(tx: Transaction, hospital: str) -> List[str]:
    return tx.get(roster_key(hospital), [])


def vet_doctor(tx: Transaction, caller: str, doctor: str) -> None:
    """Mark *doctor* verified and append them to the caller's roster.

    Vetting twice appends twice; the roster is a history, not a set.
    """
    require_hospital(load_profile(tx, caller))

    profile = load_profile(tx, doctor)
    if profile.role != "doctor" or profile.custodian != caller:
        raise NotAMember(f"{doctor} is not a doctor registered under {caller}.")

    profile.verified = True
    save_profile(tx, profile)
    tx.put(roster_key(caller), roster_of(tx, caller) + [doctor])


def set_suspended(tx: Transaction, caller: str, doctor: str, suspended: bool) -> None:
    require_hospital(load_profile(tx, caller))

    profile = load_profile(tx, doctor)
    if profile.role != "doctor" or profile.custodian != caller:
        raise Unauthorized(f"{caller} is not the custodian hospital of {doctor}.")

    profile.suspended = suspended
    save_profile(tx, profile)


def hospital_stats(tx: Transaction, hospital: str) -> Dict[str, int]:
    """Roster counts; `doctors` counts every roster entry, duplicates included."""
    roster = roster_of(tx, hospital)
    unique = list(dict.fromkeys(roster))
    profiles = [load_profile(tx, d) for d in unique]
    return {
        "doctors": len(roster),
        "unique_doctors": len(unique),
        "suspended": sum(1 for p in profiles if p.suspended),
    }
