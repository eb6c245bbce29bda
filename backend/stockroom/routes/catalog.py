# Overview: Flask API routes for the catalog (items, vendors, kitchens).

"""
Catalog Routes

SECURITY: All routes require an authenticated identity.
- Reads are open to both roles (chefs need items and vendors to log stock);
  the kitchen directory is filtered so a chef sees only their own kitchen.
- Create/update/delete are Founder-only (enforced in InventoryService).

Deleting a catalog row never touches the movement ledger.
"""

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, handle_service_errors
from . import inventory_service, bool_arg, json_payload


items_bp = Blueprint("items", __name__, url_prefix="/api/items")
vendors_bp = Blueprint("vendors", __name__, url_prefix="/api/vendors")
chefs_bp = Blueprint("chefs", __name__, url_prefix="/api/chefs")


# =============================================================================
# ITEMS
# =============================================================================

@items_bp.get("")
@require_auth
@handle_service_errors("list items")
def list_items_route():
    include_inactive = bool_arg("include_inactive", default=True)
    items = inventory_service().list_items(g.current_user, include_inactive=include_inactive)
    return jsonify({"items": [i.to_dict() for i in items], "count": len(items)})


@items_bp.post("")
@require_auth
@handle_service_errors("create item")
def create_item_route():
    """
    Request body:
    {"name": "Glass jar 1L", "unit": "pcs", "sku": "JAR-1L", "min_stock": 20}
    """
    item = inventory_service().create_item(g.current_user, json_payload())
    return jsonify(item.to_dict()), 201


@items_bp.get("/<item_id>")
@require_auth
@handle_service_errors("load item")
def get_item_route(item_id: str):
    return jsonify(inventory_service().catalog.get_item(item_id).to_dict())


@items_bp.patch("/<item_id>")
@require_auth
@handle_service_errors("update item")
def update_item_route(item_id: str):
    item = inventory_service().update_item(g.current_user, item_id, json_payload())
    return jsonify(item.to_dict())


@items_bp.delete("/<item_id>")
@require_auth
@handle_service_errors("delete item")
def delete_item_route(item_id: str):
    inventory_service().delete_item(g.current_user, item_id)
    return "", 204


# =============================================================================
# VENDORS
# =============================================================================

@vendors_bp.get("")
@require_auth
@handle_service_errors("list vendors")
def list_vendors_route():
    include_inactive = bool_arg("include_inactive", default=True)
    vendors = inventory_service().list_vendors(g.current_user, include_inactive=include_inactive)
    return jsonify({"items": [v.to_dict() for v in vendors], "count": len(vendors)})


@vendors_bp.post("")
@require_auth
@handle_service_errors("create vendor")
def create_vendor_route():
    """
    Request body:
    {"name": "FreshPack Co", "phone": "...", "email": "...", "address": "..."}
    """
    vendor = inventory_service().create_vendor(g.current_user, json_payload())
    return jsonify(vendor.to_dict()), 201


@vendors_bp.get("/<vendor_id>")
@require_auth
@handle_service_errors("load vendor")
def get_vendor_route(vendor_id: str):
    return jsonify(inventory_service().catalog.get_vendor(vendor_id).to_dict())


@vendors_bp.patch("/<vendor_id>")
@require_auth
@handle_service_errors("update vendor")
def update_vendor_route(vendor_id: str):
    vendor = inventory_service().update_vendor(g.current_user, vendor_id, json_payload())
    return jsonify(vendor.to_dict())


@vendors_bp.delete("/<vendor_id>")
@require_auth
@handle_service_errors("delete vendor")
def delete_vendor_route(vendor_id: str):
    inventory_service().delete_vendor(g.current_user, vendor_id)
    return "", 204


# =============================================================================
# KITCHENS (CHEFS)
# =============================================================================

@chefs_bp.get("")
@require_auth
@handle_service_errors("list kitchens")
def list_chefs_route():
    include_inactive = bool_arg("include_inactive", default=True)
    chefs = inventory_service().list_chefs(g.current_user, include_inactive=include_inactive)
    return jsonify({"items": [c.to_dict() for c in chefs], "count": len(chefs)})


@chefs_bp.post("")
@require_auth
@handle_service_errors("create kitchen")
def create_chef_route():
    chef = inventory_service().create_chef(g.current_user, json_payload())
    return jsonify(chef.to_dict()), 201


@chefs_bp.get("/<chef_id>")
@require_auth
@handle_service_errors("load kitchen")
def get_chef_route(chef_id: str):
    return jsonify(inventory_service().get_chef(g.current_user, chef_id).to_dict())


@chefs_bp.patch("/<chef_id>")
@require_auth
@handle_service_errors("update kitchen")
def update_chef_route(chef_id: str):
    chef = inventory_service().update_chef(g.current_user, chef_id, json_payload())
    return jsonify(chef.to_dict())


@chefs_bp.delete("/<chef_id>")
@require_auth
@handle_service_errors("delete kitchen")
def delete_chef_route(chef_id: str):
    inventory_service().delete_chef(g.current_user, chef_id)
    return "", 204
