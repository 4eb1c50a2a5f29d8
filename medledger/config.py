"""
Centralised configuration constants and environment helpers.
"""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

# ── Roles / record types ─────────────────────────────────────────────
ROLES = {"patient", "doctor", "hospital"}

RECORD_TYPES = {"diagnosis", "treatment", "examination", "surgery"}

# Longest accepted identity handle; storage keys embed up to two handles.
MAX_IDENTITY_LENGTH = 120

# Expiry sentinel meaning "never expires".
NO_EXPIRY = 0

# ── Storage ──────────────────────────────────────────────────────────
DB_URI = os.getenv("LEDGER_DB_URI", "sqlite+pysqlite:///:memory:")
KV_TABLE = "ledger_kv"

# Identity that deploys the ledger and holds the admin slot on first start.
DEPLOYER_IDENTITY = os.getenv("LEDGER_ADMIN", "0x0000000000000000000000000000000000000001")

# ── Audit ────────────────────────────────────────────────────────────
MAX_AUDIT_ROWS = 20

# ── API server ───────────────────────────────────────────────────────
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
CALLER_HEADER = "X-Caller-Identity"


def get_env(name: str) -> str:
    """Return an environment variable or exit with an error message."""
    value = os.getenv(name)
    if not value:
        print(f"ERROR: env var {name} is not set", file=sys.stderr)
        sys.exit(1)
    return value
