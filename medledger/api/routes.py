"""
Flask route handlers for the REST API.
"""

from flask import jsonify, request

from medledger.config import NO_EXPIRY
from medledger.errors import (
    AlreadyRegistered,
    LedgerError,
    NotFound,
    SystemInactive,
    Unauthorized,
)
from medledger.api.caller import caller_required

STATUS_BY_ERROR = [
    (Unauthorized, 403),
    (NotFound, 404),
    (AlreadyRegistered, 409),
    (SystemInactive, 503),
]


def error_status(error: LedgerError) -> int:
    for cls, status in STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def non_string_field(data: dict, *names):
    """First field present in *data* whose value is not a string, or None."""
    for name in names:
        if name in data and not isinstance(data[name], str):
            return name
    return None


def bad_request(message: str):
    return jsonify({"error": "BadRequest", "message": message}), 400


def register_routes(app, ledger):
    """Register all API routes on the Flask *app*."""

    # ── Health / info ────────────────────────────────────────────────

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "service": "MedLedger API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "register": "/api/register",
                "profile": "/api/profiles/<identity>",
                "roster": "/api/hospitals/<hospital>/roster",
                "access": "/api/access/<hospital>",
                "records": "/api/records",
                "system": "/api/system",
                "health": "/health",
            },
        })

    @app.route("/health", methods=["GET"])
    def health():
        config = ledger.system_status()
        return jsonify({
            "status": "healthy",
            "system_active": config.active,
            "records": ledger.record_count(),
        }), 200

    # ── Identity Registry ────────────────────────────────────────────

    @app.route("/api/register", methods=["POST"])
    @caller_required
    def register():
        data = json_body()
        bad = non_string_field(data, "role", "name")
        if data.get("custodian") is not None and not isinstance(data["custodian"], str):
            bad = "custodian"
        if bad:
            return bad_request(f"{bad} must be a string")
        profile = ledger.register(request.caller, data.get("role", ""),
                                  data.get("name", ""), data.get("custodian"))
        return jsonify({"success": True, "profile": profile.to_dict()}), 201

    @app.route("/api/profiles/<identity>", methods=["GET"])
    def profile(identity):
        p = ledger.profile(identity)
        return jsonify({"profile": p.to_dict(), "status": ledger.status(identity)}), 200

    # ── Hospital Roster ──────────────────────────────────────────────

    @app.route("/api/doctors/<doctor>/vet", methods=["POST"])
    @caller_required
    def vet_doctor(doctor):
        ledger.vet_doctor(request.caller, doctor)
        return jsonify({"success": True}), 200

    @app.route("/api/doctors/<doctor>/suspend", methods=["POST"])
    @caller_required
    def suspend_doctor(doctor):
        ledger.suspend_doctor(request.caller, doctor)
        return jsonify({"success": True}), 200

    @app.route("/api/doctors/<doctor>/unsuspend", methods=["POST"])
    @caller_required
    def unsuspend_doctor(doctor):
        ledger.unsuspend_doctor(request.caller, doctor)
        return jsonify({"success": True}), 200

    @app.route("/api/hospitals/<hospital>/roster", methods=["GET"])
    def roster(hospital):
        return jsonify({
            "hospital": hospital,
            "doctors": ledger.roster_of(hospital),
            "stats": ledger.hospital_stats(hospital),
        }), 200

    # ── Permission Ledger ────────────────────────────────────────────

    @app.route("/api/access/<hospital>", methods=["POST"])
    @caller_required
    def grant_access(hospital):
        try:
            expires_at = int(json_body().get("expires_at", NO_EXPIRY))
        except (TypeError, ValueError):
            return bad_request("expires_at must be an integer")
        permission = ledger.grant_access(request.caller, hospital, expires_at)
        return jsonify({"success": True, "permission": permission.to_dict()}), 200

    @app.route("/api/access/<hospital>", methods=["DELETE"])
    @caller_required
    def revoke_access(hospital):
        ledger.revoke_access(request.caller, hospital)
        return jsonify({"success": True}), 200

    @app.route("/api/access/<patient>/<hospital>", methods=["GET"])
    def has_access(patient, hospital):
        return jsonify({"has_access": ledger.has_access(patient, hospital)}), 200

    # ── Record Store ─────────────────────────────────────────────────

    @app.route("/api/records", methods=["POST"])
    @caller_required
    def add_record():
        data = json_body()
        bad = non_string_field(data, "patient", "data", "record_type")
        if bad:
            return bad_request(f"{bad} must be a string")
        record_id = ledger.add_record(request.caller, data.get("patient", ""),
                                      data.get("data", ""), data.get("record_type", ""))
        return jsonify({"success": True, "record_id": record_id}), 201

    @app.route("/api/records/<int:record_id>", methods=["PUT"])
    @caller_required
    def update_record(record_id):
        data = json_body()
        if non_string_field(data, "data"):
            return bad_request("data must be a string")
        ledger.update_record(request.caller, record_id, data.get("data", ""))
        return jsonify({"success": True}), 200

    @app.route("/api/records/<int:record_id>", methods=["GET"])
    @caller_required
    def get_record(record_id):
        record = ledger.get_record(request.caller, record_id)
        return jsonify({"record": record.to_dict()}), 200

    @app.route("/api/patients/<patient>/records", methods=["GET"])
    @caller_required
    def records_of(patient):
        return jsonify({"patient": patient,
                        "record_ids": ledger.records_of(request.caller, patient)}), 200

    @app.route("/api/me/records", methods=["GET"])
    @caller_required
    def my_records():
        return jsonify({"record_ids": ledger.my_records(request.caller)}), 200

    # ── System Gate ──────────────────────────────────────────────────

    @app.route("/api/system", methods=["GET"])
    def system_status():
        return jsonify(ledger.system_status().to_dict()), 200

    @app.route("/api/system/toggle", methods=["POST"])
    @caller_required
    def toggle_system():
        return jsonify({"success": True, "active": ledger.toggle_system(request.caller)}), 200

    @app.route("/api/system/admin", methods=["POST"])
    @caller_required
    def transfer_admin():
        new_admin = json_body().get("new_admin", "")
        if not new_admin or not isinstance(new_admin, str):
            return bad_request("new_admin must be a non-empty string")
        ledger.transfer_admin(request.caller, new_admin)
        return jsonify({"success": True, "admin": new_admin}), 200

    # ── Error handlers ───────────────────────────────────────────────

    @app.errorhandler(LedgerError)
    def ledger_error(e):
        return jsonify({"error": e.kind, "message": str(e)}), error_status(e)

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Endpoint not found", "message": str(e)}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed", "message": str(e)}), 405

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "Internal server error", "message": str(e)}), 500
