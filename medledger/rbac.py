"""
Role-Based Access Control – caller predicates and the checks built on them.
"""

from medledger.errors import NotAPatient, SystemInactive, Unauthorized
from medledger.models import SystemConfig, UserProfile


# ── Predicates ───────────────────────────────────────────────────────

def is_patient_caller(profile: UserProfile) -> bool:
    return profile.role == "patient" and profile.active


def is_doctor_caller(profile: UserProfile) -> bool:
    """A doctor may practice only when vetted, active and not suspended."""
    return (
        profile.role == "doctor"
        and profile.verified
        and profile.active
        and not profile.suspended
    )


def is_hospital_caller(profile: UserProfile) -> bool:
    return profile.role == "hospital" and profile.active


def is_system_admin(identity: str, config: SystemConfig) -> bool:
    return identity == config.admin


# ── Checks ───────────────────────────────────────────────────────────

def require_system_active(config: SystemConfig) -> None:
    if not config.active:
        raise SystemInactive("The system is currently paused.")


def require_patient(profile: UserProfile) -> None:
    if not is_patient_caller(profile):
        raise NotAPatient(f"{profile.identity} is not an active patient.")


def require_doctor(profile: UserProfile) -> None:
    """Raise Unauthorized with the first doctor condition that fails."""
    if is_doctor_caller(profile):
        return
    if profile.role != "doctor":
        raise Unauthorized(f"{profile.identity} is not a registered doctor.")
    if not profile.verified:
        raise Unauthorized(f"Doctor {profile.identity} has not been vetted by their hospital.")
    if profile.suspended:
        raise Unauthorized(f"Doctor {profile.identity} is suspended.")
    raise Unauthorized(f"Doctor {profile.identity} is not active.")


def require_hospital(profile: UserProfile) -> None:
    if not is_hospital_caller(profile):
        raise Unauthorized(f"{profile.identity} is not an active hospital.")


def require_admin(identity: str, config: SystemConfig) -> None:
    if not is_system_admin(identity, config):
        raise Unauthorized(f"{identity} is not the system admin.")
