"""
Flask application factory and server entry-point.
"""

import sys
import traceback

from flask import Flask
from flask_cors import CORS

from medledger.api.routes import register_routes
from medledger.config import API_HOST, API_PORT, CALLER_HEADER, DB_URI
from medledger.events import PrintEventSink
from medledger.ledger import Ledger
from medledger.storage import open_store


def create_app(ledger=None):
    """Build and return a fully configured Flask application."""
    app = Flask(__name__)
    CORS(app)

    # ── Initialise shared resources ──────────────────────────────────
    if ledger is None:
        try:
            print("[init] Opening ledger store...")
            ledger = Ledger(store=open_store(DB_URI), sink=PrintEventSink())
            print(f"[init] System admin: {ledger.system_status().admin}")
            print("[init] ✓ API server ready")
        except Exception as e:
            print(f"[FATAL] Failed to initialize: {e}", file=sys.stderr)
            traceback.print_exc()
            sys.exit(1)

    app.config["LEDGER"] = ledger

    # ── Register routes ──────────────────────────────────────────────
    register_routes(app, ledger)

    return app


def main():
    """Run the development server."""
    print("=" * 60)
    print("MedLedger – REST API Server")
    print("=" * 60)

    app = create_app()

    print(f"\n[server] Starting Flask API on {API_HOST}:{API_PORT}")
    print(f"[server] Caller header: {CALLER_HEADER}")
    print("\nAPI Endpoints:")
    print(f"  - POST http://{API_HOST}:{API_PORT}/api/register")
    print(f"  - POST http://{API_HOST}:{API_PORT}/api/access/<hospital>")
    print(f"  - POST http://{API_HOST}:{API_PORT}/api/records")
    print(f"  - GET  http://{API_HOST}:{API_PORT}/api/records/<id>")
    print(f"  - POST http://{API_HOST}:{API_PORT}/api/system/toggle")
    print(f"  - GET  http://{API_HOST}:{API_PORT}/health")
    print("\n" + "=" * 60)

    app.run(host=API_HOST, port=API_PORT, threaded=True)


if __name__ == "__main__":
    main()
