# Overview: Flask API routes for the stock movement ledger.

"""
Movement Routes

SECURITY: All routes require an authenticated identity.
- Founder: records for the warehouse or any kitchen, lists every movement.
- Home Chef: records for and lists only their own kitchen.
- Movements are append-only. There is no PATCH or DELETE; a mistaken
  movement is voided, which appends a compensating movement.

Owner selection (body "chef_id" / query "chef_id"):
- omitted: caller's default (warehouse for the Founder, own kitchen for a chef)
- null or "warehouse": the shared warehouse
- any other string: that kitchen
"""

from flask import Blueprint, current_app, jsonify, g

from ..decorators import require_auth, handle_service_errors
from ..validation import ValidationError
from . import inventory_service, json_payload, limit_arg, owner_arg, owner_from_payload


movements_bp = Blueprint("movements", __name__, url_prefix="/api/movements")

MOVEMENT_FIELDS = {"item_id", "kind", "quantity", "chef_id", "vendor_id", "note", "unit_cost"}


@movements_bp.get("")
@require_auth
@handle_service_errors("list movements")
def list_movements_route():
    limit = limit_arg(current_app.config["MOVEMENT_LIST_LIMIT"])
    rows = inventory_service().list_movements(g.current_user, owner_arg(), limit=limit)
    return jsonify({"items": [r.to_dict() for r in rows], "count": len(rows), "limit": limit})


@movements_bp.post("")
@require_auth
@handle_service_errors("record movement")
def record_movement_route():
    """
    Request body:
    {
        "item_id": "...",        // required
        "kind": "IN",            // IN | OUT | ADJUST
        "quantity": 12.5,        // finite, > 0
        "chef_id": null,         // optional, see owner selection
        "vendor_id": "...",      // optional
        "unit_cost": 1.25,       // optional, >= 0
        "note": "..."            // optional
    }
    """
    payload = json_payload()
    unknown = sorted(set(payload) - MOVEMENT_FIELDS)
    if unknown:
        raise ValidationError(f"Field not allowed: {', '.join(unknown)}")

    svc = inventory_service()
    mv = svc.record_movement(
        g.current_user,
        item_id=payload.get("item_id"),
        kind=payload.get("kind"),
        quantity=payload.get("quantity"),
        chef_id=owner_from_payload(payload),
        vendor_id=payload.get("vendor_id"),
        note=payload.get("note"),
        unit_cost=payload.get("unit_cost"),
    )
    on_hand = svc.ledger.on_hand(mv.item_id, mv.chef_id)
    return jsonify({"movement": mv.to_dict(), "on_hand": on_hand}), 201


@movements_bp.get("/<movement_id>")
@require_auth
@handle_service_errors("load movement")
def get_movement_route(movement_id: str):
    return jsonify(inventory_service().get_movement(g.current_user, movement_id).to_dict())


@movements_bp.post("/<movement_id>/void")
@require_auth
@handle_service_errors("void movement")
def void_movement_route(movement_id: str):
    payload = json_payload()
    svc = inventory_service()
    reversal = svc.void_movement(g.current_user, movement_id, note=payload.get("note"))
    on_hand = svc.ledger.on_hand(reversal.item_id, reversal.chef_id)
    return jsonify({"movement": reversal.to_dict(), "on_hand": on_hand}), 201
