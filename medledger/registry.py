"""
Identity Registry – one profile per identity, role fixed at registration.
"""

from typing import Dict, Optional

from medledger.config import MAX_IDENTITY_LENGTH, ROLES
from medledger.errors import AlreadyRegistered, InvalidCustodian, InvalidIdentity, InvalidRole
from medledger.models import LedgerEvent, UserProfile
from medledger.storage import Transaction


def profile_key(identity: str) -> str:
    return f"identity:{identity}"


def check_identity(identity) -> None:
    """Handles are opaque, but must be non-empty strings of bounded length."""
    if not isinstance(identity, str) or not identity or not identity.isprintable():
        raise InvalidIdentity("Identity must be a non-empty printable string.")
    if len(identity) > MAX_IDENTITY_LENGTH:
        raise InvalidIdentity(f"Identity is longer than {MAX_IDENTITY_LENGTH} characters.")


def load_profile(tx: Transaction, identity: str) -> UserProfile:
    """Stored profile, or the zero-value profile for unknown identities."""
    data = tx.get(profile_key(identity))
    if data is None:
        return UserProfile.empty(identity)
    return UserProfile.from_dict(data)


def save_profile(tx: Transaction, profile: UserProfile) -> None:
    tx.put(profile_key(profile.identity), profile.to_dict())


def register(tx: Transaction, caller: str, role: str, name: str,
             custodian: Optional[str], now: int) -> UserProfile:
    check_identity(caller)
    role = str(role).strip().lower()
    if role not in ROLES:
        raise InvalidRole(f"Unsupported role '{role}'.")

    if load_profile(tx, caller).registered:
        raise AlreadyRegistered(f"{caller} is already registered.")

    if role == "doctor":
        hospital = load_profile(tx, custodian) if isinstance(custodian, str) and custodian else None
        if hospital is None or hospital.role != "hospital":
            raise InvalidCustodian(f"Custodian '{custodian}' is not a registered hospital.")
        profile = UserProfile(identity=caller, name=name, role=role, custodian=custodian,
                              active=True, registered=True)
    else:
        profile = UserProfile(identity=caller, name=name, role=role,
                              verified=True, active=True, registered=True)

    save_profile(tx, profile)
    tx.emit(LedgerEvent("registered", now, {"identity": caller, "role": role}))
    return profile


def status_of(profile: UserProfile) -> Dict[str, bool]:
    return {
        "verified": profile.verified,
        "active": profile.active,
        "suspended": profile.suspended,
    }
