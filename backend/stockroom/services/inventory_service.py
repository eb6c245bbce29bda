# Overview: Orchestrates catalog, ledger, policy and audit into user-facing operations.

"""
Inventory Service

WHY: The four core components do not know about each other. This layer is
where a user identity meets them:

    policy check -> catalog/ledger write -> exactly one audit entry -> commit

Every write runs as one DB transaction under run_with_retry. If anything
fails (validation, permission, database), the session is rolled back and
neither the write nor its audit entry survives.

Reads are filtered through the access policy before they are returned.
"""

from __future__ import annotations

from typing import Optional

from .access_policy import (
    CurrentUser,
    can_manage_catalog,
    can_manage_chefs,
    can_manage_vendor,
    can_record_for,
    can_view_overview,
    can_view_owner,
    require,
    visible_audit,
    visible_chefs,
    visible_movements,
)
from .audit_service import AuditRecorder
from .catalog_service import CatalogStore
from .concurrency import run_with_retry
from .ledger_service import MovementLedger
from ..validation import NotFoundError


# Sentinel for "owner not specified" (distinct from None = warehouse)
DEFAULT_OWNER = object()


def owner_scope(chef_id: Optional[str]) -> str:
    return "chef" if chef_id else "founder"


class InventoryService:
    def __init__(self, session, *, catalog=None, ledger=None, audit=None):
        self.session = session
        self.catalog = catalog or CatalogStore(session)
        self.ledger = ledger or MovementLedger(session)
        self.audit = audit or AuditRecorder(session)

    # ------------------------------------------------------------------
    # Transaction unit
    # ------------------------------------------------------------------

    def _write(self, op):
        def _unit():
            try:
                result = op()
                self.session.commit()
            except Exception:
                self.session.rollback()
                self.catalog.invalidate()
                self.ledger.invalidate()
                raise
            return result

        return run_with_retry(_unit, session=self.session)

    def resolve_owner(self, user: CurrentUser, chef_id=DEFAULT_OWNER) -> Optional[str]:
        """Founder defaults to the warehouse, a chef to their own kitchen."""
        if chef_id is DEFAULT_OWNER:
            return None if user.is_founder else user.chef_id
        return chef_id

    # ------------------------------------------------------------------
    # Catalog: items
    # ------------------------------------------------------------------

    def create_item(self, user: CurrentUser, fields: dict):
        require(can_manage_catalog(user), "Only the Founder can manage items")

        def _op():
            item = self.catalog.create_item(fields)
            self.audit.log(
                actor=user.id,
                action="catalog.item.create",
                scope="founder",
                ref_id=item.id,
                meta={"name": item.name, "unit": item.unit, "sku": item.sku},
            )
            return item

        return self._write(_op)

    def update_item(self, user: CurrentUser, item_id: str, patch: dict):
        require(can_manage_catalog(user), "Only the Founder can manage items")

        def _op():
            item, changed = self.catalog.update_item(item_id, patch)
            self.audit.log(
                actor=user.id,
                action="catalog.item.update",
                scope="founder",
                ref_id=item.id,
                meta={"name": item.name, "changed": sorted(changed)},
            )
            return item

        return self._write(_op)

    def delete_item(self, user: CurrentUser, item_id: str) -> None:
        require(can_manage_catalog(user), "Only the Founder can manage items")

        def _op():
            item = self.catalog.delete_item(item_id)
            self.audit.log(
                actor=user.id,
                action="catalog.item.delete",
                scope="founder",
                ref_id=item_id,
                meta={"name": item.name},
            )

        self._write(_op)

    # ------------------------------------------------------------------
    # Catalog: vendors
    # ------------------------------------------------------------------

    def create_vendor(self, user: CurrentUser, fields: dict):
        require(can_manage_vendor(user), "Only the Founder can manage vendors")

        def _op():
            vendor = self.catalog.create_vendor(fields)
            self.audit.log(
                actor=user.id,
                action="catalog.vendor.create",
                scope="founder",
                ref_id=vendor.id,
                meta={"name": vendor.name, "phone": vendor.phone},
            )
            return vendor

        return self._write(_op)

    def update_vendor(self, user: CurrentUser, vendor_id: str, patch: dict):
        vendor = self.catalog.vendors_by_id().get(vendor_id)
        require(can_manage_vendor(user, vendor), "Only the Founder can manage vendors")

        def _op():
            updated, changed = self.catalog.update_vendor(vendor_id, patch)
            self.audit.log(
                actor=user.id,
                action="catalog.vendor.update",
                scope="founder",
                ref_id=updated.id,
                meta={"name": updated.name, "changed": sorted(changed)},
            )
            return updated

        return self._write(_op)

    def delete_vendor(self, user: CurrentUser, vendor_id: str) -> None:
        vendor = self.catalog.vendors_by_id().get(vendor_id)
        require(can_manage_vendor(user, vendor), "Only the Founder can manage vendors")

        def _op():
            removed = self.catalog.delete_vendor(vendor_id)
            self.audit.log(
                actor=user.id,
                action="catalog.vendor.delete",
                scope="founder",
                ref_id=vendor_id,
                meta={"name": removed.name},
            )

        self._write(_op)

    # ------------------------------------------------------------------
    # Catalog: chefs
    # ------------------------------------------------------------------

    def create_chef(self, user: CurrentUser, fields: dict):
        require(can_manage_chefs(user), "Only the Founder can manage kitchens")

        def _op():
            chef = self.catalog.create_chef(fields)
            self.audit.log(
                actor=user.id,
                action="chef.create",
                scope="founder",
                ref_id=chef.id,
                meta={"name": chef.name, "email": chef.email},
            )
            return chef

        return self._write(_op)

    def update_chef(self, user: CurrentUser, chef_id: str, patch: dict):
        require(can_manage_chefs(user), "Only the Founder can manage kitchens")

        def _op():
            chef, changed = self.catalog.update_chef(chef_id, patch)
            self.audit.log(
                actor=user.id,
                action="chef.update",
                scope="founder",
                ref_id=chef.id,
                meta={"name": chef.name, "changed": sorted(changed)},
            )
            return chef

        return self._write(_op)

    def delete_chef(self, user: CurrentUser, chef_id: str) -> None:
        require(can_manage_chefs(user), "Only the Founder can manage kitchens")

        def _op():
            chef = self.catalog.delete_chef(chef_id)
            self.audit.log(
                actor=user.id,
                action="chef.delete",
                scope="founder",
                ref_id=chef_id,
                meta={"name": chef.name},
            )

        self._write(_op)

    # ------------------------------------------------------------------
    # Ledger writes
    # ------------------------------------------------------------------

    def _movement_meta(self, mv) -> dict:
        return {
            "item": self.catalog.item_label(mv.item_id),
            "vendor": self.catalog.vendor_label(mv.vendor_id),
            "quantity": mv.quantity,
            "note": mv.note,
            "owner": self.catalog.owner_label(mv.chef_id),
        }

    def record_movement(
        self,
        user: CurrentUser,
        *,
        item_id: str,
        kind: str,
        quantity,
        chef_id=DEFAULT_OWNER,
        vendor_id: Optional[str] = None,
        note: Optional[str] = None,
        unit_cost=None,
    ):
        owner = self.resolve_owner(user, chef_id)
        require(can_record_for(user, owner), "You can only record movements for your own kitchen")

        def _op():
            mv = self.ledger.record_movement(
                item_id=item_id,
                kind=kind,
                quantity=quantity,
                chef_id=owner,
                vendor_id=vendor_id,
                note=note,
                unit_cost=unit_cost,
                actor_id=user.id,
            )
            self.audit.log(
                actor=user.id,
                action=f"stock.{mv.kind.lower()}",
                scope=owner_scope(mv.chef_id),
                chef_id=mv.chef_id,
                ref_id=mv.id,
                meta=self._movement_meta(mv),
            )
            return mv

        return self._write(_op)

    def void_movement(self, user: CurrentUser, movement_id: str, *, note: Optional[str] = None):
        original = self.get_movement(user, movement_id)
        require(can_record_for(user, original.chef_id), "You can only void movements of your own kitchen")

        def _op():
            reversal = self.ledger.void_movement(movement_id, actor_id=user.id, note=note)
            meta = self._movement_meta(reversal)
            meta["voided_id"] = original.id
            meta["voided_kind"] = original.kind
            self.audit.log(
                actor=user.id,
                action="stock.void",
                scope=owner_scope(reversal.chef_id),
                chef_id=reversal.chef_id,
                ref_id=reversal.id,
                meta=meta,
            )
            return reversal

        return self._write(_op)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_items(self, user: CurrentUser, *, include_inactive: bool = True):
        return self.catalog.list_items(include_inactive=include_inactive)

    def list_vendors(self, user: CurrentUser, *, include_inactive: bool = True):
        return self.catalog.list_vendors(include_inactive=include_inactive)

    def list_chefs(self, user: CurrentUser, *, include_inactive: bool = True):
        return visible_chefs(user, self.catalog.list_chefs(include_inactive=include_inactive))

    def get_chef(self, user: CurrentUser, chef_id: str):
        if not can_view_owner(user, chef_id):
            raise NotFoundError(f"Chef {chef_id} not found")
        return self.catalog.get_chef(chef_id)

    def get_movement(self, user: CurrentUser, movement_id: str):
        mv = self.ledger.get_movement(movement_id)
        if not can_view_owner(user, mv.chef_id):
            # Other kitchens' rows are indistinguishable from missing ones
            raise NotFoundError(f"StockMovement {movement_id} not found")
        return mv

    def list_movements(self, user: CurrentUser, chef_id=DEFAULT_OWNER, *, limit: Optional[int] = None):
        """
        Without an explicit owner the Founder gets every movement and a chef
        gets their own kitchen. With an explicit owner the policy decides.
        """
        if chef_id is DEFAULT_OWNER:
            if user.is_founder:
                rows = self.ledger.all_movements(limit=limit)
            elif user.chef_id is None:
                rows = []
            else:
                rows = self.ledger.movements_for(user.chef_id, limit=limit)
        else:
            require(can_view_owner(user, chef_id), "Owner not visible to this user")
            rows = self.ledger.movements_for(chef_id, limit=limit)
        return visible_movements(user, rows)

    def on_hand(self, user: CurrentUser, item_id: str, chef_id=DEFAULT_OWNER) -> float:
        owner = self.resolve_owner(user, chef_id)
        require(can_view_owner(user, owner), "Owner not visible to this user")
        return self.ledger.on_hand(item_id, owner)

    def owner_summary(self, user: CurrentUser, chef_id=DEFAULT_OWNER) -> dict:
        owner = self.resolve_owner(user, chef_id)
        require(can_view_owner(user, owner), "Owner not visible to this user")
        return self._summary_for(owner)

    def overview(self, user: CurrentUser) -> dict:
        require(can_view_overview(user), "The overview is only available to the Founder")

        owners: list[Optional[str]] = [None]
        owners.extend(chef.id for chef in self.catalog.list_chefs())
        # Kitchens deleted from the catalog still own ledger rows
        known = set(owners)
        owners.extend(sorted(o for o in self.ledger.owners() if o not in known))

        summaries = [self._summary_for(owner) for owner in owners]
        return {
            "owners": summaries,
            "total_on_hand": sum(s["total_on_hand"] for s in summaries),
            "low_stock_count": sum(s["low_stock_count"] for s in summaries),
        }

    def _summary_for(self, owner: Optional[str]) -> dict:
        balances = self.ledger.on_hand_by_key()
        items = self.catalog.list_items()
        catalog_ids = {item.id for item in items}

        totals = []
        for item in items:
            qty = balances.get((item.id, owner), 0.0)
            low = item.min_stock is not None and qty < item.min_stock
            totals.append({
                "item_id": item.id,
                "item": item.name,
                "unit": item.unit,
                "quantity": qty,
                "min_stock": item.min_stock,
                "low_stock": low,
            })
        # Deleted items keep their history and balance
        for (item_id, chef_id), qty in sorted(balances.items(), key=lambda kv: kv[0][0]):
            if chef_id == owner and item_id not in catalog_ids:
                totals.append({
                    "item_id": item_id,
                    "item": self.catalog.item_label(item_id),
                    "unit": None,
                    "quantity": qty,
                    "min_stock": None,
                    "low_stock": False,
                })

        movements = self.ledger.movements_for(owner)
        return {
            "chef_id": owner,
            "name": self.catalog.owner_label(owner),
            "totals": totals,
            "total_on_hand": sum(row["quantity"] for row in totals),
            "low_stock_count": sum(1 for row in totals if row["low_stock"]),
            "shipments_in": sum(1 for mv in movements if mv.kind == "IN"),
            "shipments_out": sum(1 for mv in movements if mv.kind == "OUT"),
        }

    def list_audit(self, user: CurrentUser, *, limit: Optional[int] = None) -> list:
        if user.is_founder:
            rows = self.audit.entries(limit=limit)
        elif user.chef_id is None:
            rows = []
        else:
            rows = self.audit.entries_for_chef(user.chef_id, limit=limit)
        return visible_audit(user, rows)
