"""
Caller identity for the Flask API.

Requests arrive through an authenticating gateway that sets the caller
header; the ledger trusts that value as given.
"""

from functools import wraps

from flask import jsonify, request

from medledger.config import CALLER_HEADER


def caller_required(f):
    """Decorator that rejects requests without a caller identity."""
    @wraps(f)
    def decorated(*args, **kwargs):
        caller = request.headers.get(CALLER_HEADER, "").strip()
        if not caller:
            return jsonify({"error": "Unauthenticated",
                            "message": f"{CALLER_HEADER} header is missing"}), 401

        request.caller = caller
        return f(*args, **kwargs)

    return decorated
