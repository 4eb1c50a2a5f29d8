"""
Typed ledger errors. Every denied call raises one of these and leaves state unchanged.
"""


class LedgerError(ValueError):
    """Base class; `kind` is the stable name reported to callers."""
    kind = "LedgerError"


class Unauthorized(LedgerError):
    kind = "Unauthorized"


class NotAPatient(Unauthorized):
    kind = "NotAPatient"


class NoAccess(Unauthorized):
    kind = "NoAccess"


class NotAMember(Unauthorized):
    kind = "NotAMember"


class AlreadyRegistered(LedgerError):
    kind = "AlreadyRegistered"


class InvalidIdentity(LedgerError):
    kind = "InvalidIdentity"


class InvalidCustodian(LedgerError):
    kind = "InvalidCustodian"


class InvalidHospital(LedgerError):
    kind = "InvalidHospital"


class InvalidExpiry(LedgerError):
    kind = "InvalidExpiry"


class InvalidRole(LedgerError):
    kind = "InvalidRole"


class InvalidRecordType(LedgerError):
    kind = "InvalidRecordType"


class NotFound(LedgerError):
    kind = "NotFound"


class SystemInactive(LedgerError):
    kind = "SystemInactive"
