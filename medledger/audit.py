"""
Audit reporting – tabulate ledger events for review.
"""

from typing import Iterable, Tuple

import pandas as pd

from medledger.config import MAX_AUDIT_ROWS
from medledger.events import EVENT_KINDS
from medledger.models import LedgerEvent

EVENT_COLUMNS = ["timestamp", "kind", "identity", "role", "patient",
                 "doctor", "hospital", "record_id", "expires_at"]


def events_frame(events: Iterable[LedgerEvent]) -> pd.DataFrame:
    """One row per event, in emission order, with a fixed column set."""
    rows = [e.to_dict() for e in events]
    return pd.DataFrame(rows, columns=EVENT_COLUMNS)


def summarize_events(df: pd.DataFrame) -> Tuple[str, str]:
    """
    Returns (per_kind_summary, per_hospital_summary) as markdown tables.
    """
    if df.empty:
        return "(no events)", "(no hospital activity)"

    per_kind = (
        df["kind"].value_counts()
        .reindex(sorted(EVENT_KINDS), fill_value=0)
        .rename_axis("kind")
        .reset_index(name="count")
    )

    scoped = df.dropna(subset=["hospital"])
    if scoped.empty:
        per_hospital = "(no hospital activity)"
    else:
        table = pd.crosstab(scoped["hospital"], scoped["kind"])
        per_hospital = table.to_markdown()

    return per_kind.to_markdown(index=False), per_hospital


def audit_report(events: Iterable[LedgerEvent], max_rows: int = MAX_AUDIT_ROWS) -> str:
    df = events_frame(events)
    per_kind, per_hospital = summarize_events(df)

    if df.empty:
        preview = "(no events recorded)"
    else:
        preview = df.tail(max_rows).dropna(axis=1, how="all").to_string(index=False)

    return (
        f"Events: {len(df)}\n\n"
        f"[By kind]\n{per_kind}\n\n"
        f"[By hospital]\n{per_hospital}\n\n"
        f"[Latest events (up to {max_rows})]\n{preview}"
    )
