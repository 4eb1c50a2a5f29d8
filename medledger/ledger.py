"""
Ledger facade – the public operations, one atomic transaction per call.

Each mutating call opens a store transaction, checks the system gate where
the operation is gated, runs the component logic and commits. Events raised
during the call reach the sink only after the commit succeeded.
"""

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional

from medledger import gate, permissions, records, registry, roster
from medledger.clock import SystemClock
from medledger.config import DEPLOYER_IDENTITY, NO_EXPIRY
from medledger.events import MemoryEventSink
from medledger.models import AccessPermission, MedicalRecord, SystemConfig, UserProfile
from medledger.rbac import require_system_active
from medledger.storage import KeyValueStore, MemoryStore, Transaction


class Ledger:
    """Authorization and record-custody ledger."""

    def __init__(self, store: Optional[KeyValueStore] = None,
                 clock: Optional[Callable[[], int]] = None,
                 sink=None, deployer: str = DEPLOYER_IDENTITY):
        self.store = store if store is not None else MemoryStore()
        self.clock = clock if clock is not None else SystemClock()
        self.sink = sink if sink is not None else MemoryEventSink()
        with self._call() as tx:
            gate.ensure_config(tx, deployer)

    @contextmanager
    def _call(self, gated: bool = False) -> Iterator[Transaction]:
        with self.store.transaction() as tx:
            if gated:
                require_system_active(gate.load_config(tx))
            yield tx
        for event in tx.events:
            self.sink.emit(event)

    # ── Identity Registry ────────────────────────────────────────────

    def register(self, caller: str, role: str, name: str,
                 custodian: Optional[str] = None) -> UserProfile:
        with self._call(gated=True) as tx:
            return registry.register(tx, caller, role, name, custodian, self.clock())

    def profile(self, identity: str) -> UserProfile:
        with self._call() as tx:
            return registry.load_profile(tx, identity)

    def status(self, identity: str) -> Dict[str, bool]:
        return registry.status_of(self.profile(identity))

    def is_registered(self, identity: str) -> bool:
        return self.profile(identity).registered

    # ── Hospital Roster ──────────────────────────────────────────────

    def vet_doctor(self, caller: str, doctor: str) -> None:
        with self._call() as tx:
            roster.vet_doctor(tx, caller, doctor)

    def suspend_doctor(self, caller: str, doctor: str) -> None:
        with self._call() as tx:
            roster.set_suspended(tx, caller, doctor, True)

    def unsuspend_doctor(self, caller: str, doctor: str) -> None:
        with self._call() as tx:
            roster.set_suspended(tx, caller, doctor, False)

    def roster_of(self, hospital: str) -> List[str]:
        with self._call() as tx:
            return roster.roster_of(tx, hospital)

    def hospital_stats(self, hospital: str) -> Dict[str, int]:
        with self._call() as tx:
            return roster.hospital_stats(tx, hospital)

    # ── Permission Ledger ────────────────────────────────────────────

    def grant_access(self, caller: str, hospital: str, expires_at: int = NO_EXPIRY) -> AccessPermission:
        with self._call(gated=True) as tx:
            return permissions.grant(tx, caller, hospital, expires_at, self.clock())

    def revoke_access(self, caller: str, hospital: str) -> None:
        with self._call() as tx:
            permissions.revoke(tx, caller, hospital, self.clock())

    def has_access(self, patient: str, hospital: str) -> bool:
        with self._call() as tx:
            return permissions.has_access(tx, patient, hospital, self.clock())

    def permission_of(self, patient: str, hospital: str) -> Optional[AccessPermission]:
        with self._call() as tx:
            return permissions.permission_of(tx, patient, hospital)

    # ── Record Store ─────────────────────────────────────────────────

    def add_record(self, caller: str, patient: str, data: str, record_type: str) -> int:
        with self._call(gated=True) as tx:
            return records.add_record(tx, caller, patient, data, record_type, self.clock())

    def update_record(self, caller: str, record_id: int, data: str) -> None:
        with self._call(gated=True) as tx:
            records.update_record(tx, caller, record_id, data)

    def get_record(self, caller: str, record_id: int) -> MedicalRecord:
        with self._call() as tx:
            return records.get_record(tx, caller, record_id, self.clock())

    def records_of(self, caller: str, patient: str) -> List[int]:
        with self._call() as tx:
            return records.records_of(tx, caller, patient, self.clock())

    def my_records(self, caller: str) -> List[int]:
        with self._call() as tx:
            return records.my_records(tx, caller)

    def record_count(self) -> int:
        with self._call() as tx:
            return records.record_count(tx)

    # ── System Gate ──────────────────────────────────────────────────

    def toggle_system(self, caller: str) -> bool:
        with self._call() as tx:
            return gate.toggle(tx, caller)

    def transfer_admin(self, caller: str, new_admin: str) -> None:
        with self._call() as tx:
            gate.transfer_admin(tx, caller, new_admin)

    def system_status(self) -> SystemConfig:
        with self._call() as tx:
            return gate.load_config(tx)
