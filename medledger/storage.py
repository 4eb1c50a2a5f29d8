"""
Key-value storage with atomic, serialized transactions.

A ledger call opens one transaction, reads and buffers writes through it, and
the store applies the buffered writes in a single batch only if the call
completes. Values are JSON documents.
"""

import json
import sys
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from medledger.config import DB_URI, KV_TABLE
from medledger.models import LedgerEvent

MEMORY_URI = "memory://"


class Transaction:
    """Read-through view of the store plus a write buffer."""

    def __init__(self, store: "KeyValueStore"):
        self._store = store
        self.writes: Dict[str, str] = {}
        self.events: List[LedgerEvent] = []

    def get(self, key: str, default: Any = None) -> Any:
        raw = self.writes.get(key)
        if raw is None:
            raw = self._store.read(key)
        if raw is None:
            return default
        return json.loads(raw)

    def put(self, key: str, value: Any) -> None:
        self.writes[key] = json.dumps(value)

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)


class KeyValueStore:
    """Base store: one lock serializes every transaction."""

    def __init__(self):
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        with self._lock:
            tx = Transaction(self)
            yield tx
            if tx.writes:
                self.apply(tx.writes)

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def apply(self, writes: Dict[str, str]) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store, state is lost on exit."""

    def __init__(self):
        super().__init__()
        self._data: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def apply(self, writes: Dict[str, str]) -> None:
        self._data.update(writes)


class SqlStore(KeyValueStore):
    """Store backed by a single SQL table of (item_key, item_value) rows."""

    def __init__(self, engine: Engine, table: str = KV_TABLE):
        super().__init__()
        self.engine = engine
        self.table = table
        with engine.begin() as conn:
            conn.execute(text(f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    item_key VARCHAR(512) PRIMARY KEY,
                    item_value TEXT NOT NULL
                )
            """))

    def read(self, key: str) -> Optional[str]:
        sql = text(f"SELECT item_value FROM {self.table} WHERE item_key = :k")
        with self.engine.connect() as conn:
            row = conn.execute(sql, {"k": key}).mappings().first()
        return row["item_value"] if row else None

    def apply(self, writes: Dict[str, str]) -> None:
        update = text(f"UPDATE {self.table} SET item_value = :v WHERE item_key = :k")
        insert = text(f"INSERT INTO {self.table} (item_key, item_value) VALUES (:k, :v)")
        with self.engine.begin() as conn:
            for key, value in writes.items():
                result = conn.execute(update, {"k": key, "v": value})
                if result.rowcount == 0:
                    conn.execute(insert, {"k": key, "v": value})


def init_engine(db_uri: str = DB_URI) -> Engine:
    """Create a SQLAlchemy engine and verify the connection."""
    kwargs = {}
    if db_uri.startswith("sqlite") and ":memory:" in db_uri:
        # one shared connection, otherwise each checkout sees an empty database
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    engine = create_engine(db_uri, echo=False, future=True, **kwargs)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        print("ERROR: could not connect to DB:", e, file=sys.stderr)
        sys.exit(1)
    print("[init] Connected to DB.")
    return engine


def open_store(db_uri: str = DB_URI) -> KeyValueStore:
    """Return a MemoryStore for ``memory://``, otherwise a SqlStore on *db_uri*."""
    if db_uri == MEMORY_URI:
        return MemoryStore()
    return SqlStore(init_engine(db_uri))
