"""
Clock providers. The ledger never reads the wall clock directly.
"""

import time


class SystemClock:
    """Wall-clock time in integer epoch seconds."""

    def __call__(self) -> int:
        return int(time.time())


class ManualClock:
    """Settable clock for tests and replays."""

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now
