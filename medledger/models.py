"""
Domain dataclasses used across the ledger.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from medledger.config import NO_EXPIRY


@dataclass
class UserProfile:
    """A registered identity and its status flags."""
    identity: str
    name: str = ""
    role: Optional[str] = None     # "patient", "doctor", or "hospital"
    custodian: Optional[str] = None  # hospital handle, doctors only
    verified: bool = False
    active: bool = False
    suspended: bool = False
    registered: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        return cls(**data)

    @classmethod
    def empty(cls, identity: str) -> "UserProfile":
        """Zero-value profile for an identity that never registered."""
        return cls(identity=identity)


@dataclass
class AccessPermission:
    """A patient's grant to one hospital."""
    patient: str
    hospital: str
    granted_at: int = 0
    expires_at: int = NO_EXPIRY
    active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessPermission":
        return cls(**data)


@dataclass
class MedicalRecord:
    """A record authored by a doctor about a patient. Only `data` is mutable."""
    record_id: int
    patient: str
    doctor: str
    hospital: str
    data: str
    created_at: int
    record_type: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MedicalRecord":
        return cls(**data)


@dataclass
class SystemConfig:
    """Global gate and the admin slot."""
    admin: str
    active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SystemConfig":
        return cls(**data)


@dataclass
class LedgerEvent:
    """Audit event delivered to the event sink after a successful call."""
    kind: str                  # "registered", "record_added", "access_granted", "access_revoked"
    timestamp: int
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "timestamp": self.timestamp, **self.fields}
