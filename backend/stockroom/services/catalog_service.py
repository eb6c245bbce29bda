# Overview: Catalog Store for items, vendors and chefs; owns mutable reference data.

"""
Catalog Store

WHY: Items, vendors and chefs are reference data with generated identities.
They are the only mutable rows in the system; the movement ledger refers
to them by id only.

DESIGN:
- Bound to a SQLAlchemy session handed in by the caller (no module state).
- create/update validate through the same ModelValidationPolicy layer the
  HTTP routes use, so the CLI and the API reject the same inputs.
- Deletes remove the catalog row and nothing else; movements referencing a
  deleted id keep resolving through the *_label() fallbacks.
- by-id projections are read-only mappings, memoized until the next
  mutation made through this store.
- Nothing here commits; the caller owns the transaction.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from ..models import Item, Vendor, Chef
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    enforce_rules_chef,
    enforce_rules_item,
    validate_payload,
)


ITEM_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"id", "name", "unit", "sku", "min_stock", "is_active"}),
    required_on_create=frozenset({"name", "unit"}),
)

VENDOR_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"id", "name", "phone", "email", "address", "is_active"}),
    required_on_create=frozenset({"name"}),
)

CHEF_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"id", "name", "email", "phone", "address", "is_active"}),
    required_on_create=frozenset({"name"}),
)

WAREHOUSE_LABEL = "Warehouse"


class CatalogStore:
    def __init__(self, session):
        self.session = session
        self._by_id: dict[type, Mapping] = {}

    def invalidate(self) -> None:
        self._by_id.clear()

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    def _create(self, model, policy: ModelValidationPolicy, fields: dict, rules=None):
        patch = validate_payload(model=model, payload=fields, policy=policy, partial=False)
        if rules is not None:
            rules(patch)
        if patch.get("id") is not None and self.session.get(model, patch["id"]) is not None:
            raise ValidationError(f"{model.__name__} {patch['id']} already exists")
        if patch.get("id") is None:
            patch.pop("id", None)
        patch.setdefault("is_active", True)

        row = model(**patch)
        self.session.add(row)
        self.session.flush()
        self.invalidate()
        return row

    def _get(self, model, entity_id: str):
        row = self.session.get(model, entity_id) if entity_id else None
        if row is None:
            raise NotFoundError(f"{model.__name__} {entity_id} not found")
        return row

    def _update(self, model, policy: ModelValidationPolicy, entity_id: str, patch: dict, rules=None):
        row = self._get(model, entity_id)
        if patch and "id" in patch:
            raise ValidationError("id cannot be changed")
        clean = validate_payload(model=model, payload=patch, policy=policy, partial=True)
        if rules is not None:
            rules(clean)

        for key, value in clean.items():
            setattr(row, key, value)
        self.session.flush()
        self.invalidate()
        return row, clean

    def _delete(self, model, entity_id: str):
        row = self._get(model, entity_id)
        self.session.delete(row)
        self.session.flush()
        self.invalidate()
        return row

    def _list(self, model, include_inactive: bool):
        q = self.session.query(model)
        if not include_inactive:
            q = q.filter(model.is_active.is_(True))
        return q.order_by(model.name.asc(), model.id.asc()).all()

    def _projection(self, model) -> Mapping:
        cached = self._by_id.get(model)
        if cached is None:
            rows = self.session.query(model).all()
            cached = MappingProxyType({row.id: row for row in rows})
            self._by_id[model] = cached
        return cached

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def create_item(self, fields: dict) -> Item:
        return self._create(Item, ITEM_POLICY, fields, rules=enforce_rules_item)

    def update_item(self, item_id: str, patch: dict) -> tuple[Item, dict]:
        return self._update(Item, ITEM_POLICY, item_id, patch, rules=enforce_rules_item)

    def delete_item(self, item_id: str) -> Item:
        return self._delete(Item, item_id)

    def get_item(self, item_id: str) -> Item:
        return self._get(Item, item_id)

    def list_items(self, include_inactive: bool = True) -> list[Item]:
        return self._list(Item, include_inactive)

    def items_by_id(self) -> Mapping[str, Item]:
        return self._projection(Item)

    # ------------------------------------------------------------------
    # Vendors
    # ------------------------------------------------------------------

    def create_vendor(self, fields: dict) -> Vendor:
        return self._create(Vendor, VENDOR_POLICY, fields)

    def update_vendor(self, vendor_id: str, patch: dict) -> tuple[Vendor, dict]:
        return self._update(Vendor, VENDOR_POLICY, vendor_id, patch)

    def delete_vendor(self, vendor_id: str) -> Vendor:
        return self._delete(Vendor, vendor_id)

    def get_vendor(self, vendor_id: str) -> Vendor:
        return self._get(Vendor, vendor_id)

    def list_vendors(self, include_inactive: bool = True) -> list[Vendor]:
        return self._list(Vendor, include_inactive)

    def vendors_by_id(self) -> Mapping[str, Vendor]:
        return self._projection(Vendor)

    # ------------------------------------------------------------------
    # Chefs
    # ------------------------------------------------------------------

    def create_chef(self, fields: dict) -> Chef:
        return self._create(Chef, CHEF_POLICY, fields, rules=enforce_rules_chef)

    def update_chef(self, chef_id: str, patch: dict) -> tuple[Chef, dict]:
        return self._update(Chef, CHEF_POLICY, chef_id, patch)

    def delete_chef(self, chef_id: str) -> Chef:
        return self._delete(Chef, chef_id)

    def get_chef(self, chef_id: str) -> Chef:
        return self._get(Chef, chef_id)

    def list_chefs(self, include_inactive: bool = True) -> list[Chef]:
        return self._list(Chef, include_inactive)

    def chefs_by_id(self) -> Mapping[str, Chef]:
        return self._projection(Chef)

    # ------------------------------------------------------------------
    # Display fallbacks for ids that may no longer resolve
    # ------------------------------------------------------------------

    def item_label(self, item_id: str) -> str:
        item = self.items_by_id().get(item_id)
        return item.name if item is not None else f"Unknown item ({item_id})"

    def vendor_label(self, vendor_id: Optional[str]) -> Optional[str]:
        if vendor_id is None:
            return None
        vendor = self.vendors_by_id().get(vendor_id)
        return vendor.name if vendor is not None else vendor_id

    def owner_label(self, chef_id: Optional[str]) -> str:
        if chef_id is None:
            return WAREHOUSE_LABEL
        chef = self.chefs_by_id().get(chef_id)
        return chef.name if chef is not None else chef_id
