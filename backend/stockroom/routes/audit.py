# Overview: Flask API route for reading the audit trail.

from flask import Blueprint, current_app, jsonify, g

from ..decorators import require_auth, handle_service_errors
from . import inventory_service, limit_arg


audit_bp = Blueprint("audit", __name__, url_prefix="/api/audit")


@audit_bp.get("")
@require_auth
@handle_service_errors("list audit entries")
def list_audit_route():
    """
    Founder: every entry. Home Chef: chef-scope entries for their own kitchen.
    Newest first.
    """
    limit = limit_arg(current_app.config["AUDIT_LIST_LIMIT"])
    rows = inventory_service().list_audit(g.current_user, limit=limit)
    return jsonify({"items": [r.to_dict() for r in rows], "count": len(rows), "limit": limit})
