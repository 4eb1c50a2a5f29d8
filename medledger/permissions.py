"""
Permission Ledger – one grant per (patient, hospital), evaluated lazily.
"""

import json
from typing import Optional

from medledger.config import NO_EXPIRY
from medledger.errors import InvalidExpiry, InvalidHospital
from medledger.models import AccessPermission, LedgerEvent
from medledger.rbac import require_patient
from medledger.registry import check_identity, load_profile
from medledger.storage import Transaction


def permission_key(patient: str, hospital: str) -> str:
    # JSON pair: handles may contain any character, including ":".
    return "permission:" + json.dumps([patient, hospital], ensure_ascii=False)


def permission_of(tx: Transaction, patient: str, hospital: str) -> Optional[AccessPermission]:
    data = tx.get(permission_key(patient, hospital))
    if data is None:
        return None
    permission = AccessPermission.from_dict(data)
    if permission.patient != patient or permission.hospital != hospital:
        return None
    return permission


def is_live(permission: Optional[AccessPermission], now: int) -> bool:
    """Access lapses at the expiry instant itself, not after it."""
    if permission is None or not permission.active:
        return False
    if permission.expires_at != NO_EXPIRY and permission.expires_at <= now:
        return False
    return True


def has_access(tx: Transaction, patient: str, hospital: str, now: int) -> bool:
    return is_live(permission_of(tx, patient, hospital), now)


def grant(tx: Transaction, caller: str, hospital: str, expires_at: int, now: int) -> AccessPermission:
    require_patient(load_profile(tx, caller))

    if load_profile(tx, hospital).role != "hospital":
        raise InvalidHospital(f"{hospital} is not a registered hospital.")
    if expires_at != NO_EXPIRY and expires_at <= now:
        raise InvalidExpiry(f"Expiry {expires_at} is not in the future (now={now}).")

    permission = AccessPermission(patient=caller, hospital=hospital,
                                  granted_at=now, expires_at=expires_at, active=True)
    tx.put(permission_key(caller, hospital), permission.to_dict())
    tx.emit(LedgerEvent("access_granted", now, {
        "patient": caller, "hospital": hospital, "expires_at": expires_at,
    }))
    return permission


def revoke(tx: Transaction, caller: str, hospital: str, now: int) -> None:
    require_patient(load_profile(tx, caller))
    check_identity(hospital)

    permission = permission_of(tx, caller, hospital) or AccessPermission(patient=caller, hospital=hospital)
    permission.active = False
    tx.put(permission_key(caller, hospital), permission.to_dict())
    tx.emit(LedgerEvent("access_revoked", now, {"patient": caller, "hospital": hospital}))
