"""
Event sinks receiving audit events after each successful ledger call.
"""

from typing import List, Optional

from medledger.models import LedgerEvent

EVENT_KINDS = {"registered", "record_added", "access_granted", "access_revoked"}


class MemoryEventSink:
    """Keeps every event in order, used by the audit report and tests."""

    def __init__(self):
        self.events: List[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> List[LedgerEvent]:
        return [e for e in self.events if e.kind == kind]


class PrintEventSink(MemoryEventSink):
    """Also prints one line per event."""

    def __init__(self, prefix: Optional[str] = "[event]"):
        super().__init__()
        self.prefix = prefix

    def emit(self, event: LedgerEvent) -> None:
        super().emit(event)
        details = ", ".join(f"{k}={v}" for k, v in event.fields.items())
        print(f"{self.prefix} {event.kind} @ {event.timestamp}: {details}")
