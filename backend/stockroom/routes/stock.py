# Overview: Flask API routes for derived stock balances.

"""
Stock Routes (read-only)

Balances are never stored; every number here is folded from the movement
ledger at request time.

- /on-hand: one (item, owner) balance
- /summary: per-item balances, low-stock flags and shipment counts for one owner
- /overview: every owner at once (Founder only)
"""

from flask import Blueprint, jsonify, g, request

from ..decorators import require_auth, handle_service_errors
from ..validation import ValidationError
from . import inventory_service, owner_arg


stock_bp = Blueprint("stock", __name__, url_prefix="/api/stock")


@stock_bp.get("/on-hand")
@require_auth
@handle_service_errors("compute on-hand")
def on_hand_route():
    item_id = (request.args.get("item_id") or "").strip()
    if not item_id:
        raise ValidationError("item_id is required")

    svc = inventory_service()
    owner = svc.resolve_owner(g.current_user, owner_arg())
    quantity = svc.on_hand(g.current_user, item_id, owner)
    return jsonify({"item_id": item_id, "chef_id": owner, "on_hand": quantity})


@stock_bp.get("/summary")
@require_auth
@handle_service_errors("build stock summary")
def summary_route():
    return jsonify(inventory_service().owner_summary(g.current_user, owner_arg()))


@stock_bp.get("/overview")
@require_auth
@handle_service_errors("build stock overview")
def overview_route():
    return jsonify(inventory_service().overview(g.current_user))
