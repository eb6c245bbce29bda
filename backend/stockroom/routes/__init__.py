# Overview: Shared helpers for the JSON blueprints.

from flask import request

from ..extensions import db
from ..services.inventory_service import DEFAULT_OWNER, InventoryService
from ..validation import ValidationError

WAREHOUSE = "warehouse"


def inventory_service() -> InventoryService:
    """One service per request, bound to the request-scoped session."""
    return InventoryService(db.session)


def owner_arg(name: str = "chef_id"):
    """
    Read an owner from the query string.

    Absent -> DEFAULT_OWNER (caller's default), "warehouse" -> None,
    anything else -> that chef id.
    """
    if name not in request.args:
        return DEFAULT_OWNER
    raw = request.args.get(name, "").strip()
    if raw == "" or raw.lower() == WAREHOUSE:
        return None
    return raw


def owner_from_payload(payload: dict, name: str = "chef_id"):
    """Same rules as owner_arg for JSON bodies; explicit null means warehouse."""
    if name not in payload:
        return DEFAULT_OWNER
    raw = payload.get(name)
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValidationError(f"{name} must be a string or null")
    raw = raw.strip()
    if raw == "" or raw.lower() == WAREHOUSE:
        return None
    return raw


def bool_arg(name: str, default: bool = False) -> bool:
    return request.args.get(name, str(default)).lower() in ("1", "true", "yes")


def limit_arg(default: int, maximum: int = 1000) -> int:
    limit = request.args.get("limit", default, type=int)
    return max(1, min(limit, maximum))


def json_payload() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload
