# Overview: Pytest coverage for the orchestration layer (policy, writes, audit, summaries).

"""
Inventory Service Tests

Every successful write produces exactly one audit entry in the same
transaction; every rejected write produces none.
"""

import pytest

from stockroom.models import AuditEntry, StockMovement
from stockroom.services.access_policy import PermissionDeniedError
from stockroom.services.inventory_service import InventoryService
from stockroom.validation import NotFoundError, ValidationError


def _audit_count(db_session) -> int:
    return db_session.query(AuditEntry).count()


class TestAuditParity:
    def test_catalog_fixture_writes_one_entry_per_row(self, catalog, db_session):
        assert _audit_count(db_session) == 5

    def test_each_movement_writes_one_entry(self, catalog, founder, chef_a, db_session):
        before = _audit_count(db_session)
        catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=10)
        catalog.record_movement(founder, item_id="cnt_200ml", kind="OUT", quantity=3)
        catalog.record_movement(chef_a, item_id="cnt_200ml", kind="IN", quantity=4)

        assert _audit_count(db_session) == before + 3

    def test_entry_references_the_movement(self, catalog, chef_a, db_session):
        mv = catalog.record_movement(chef_a, item_id="cnt_100ml", kind="IN", quantity=6, note="Delivery")

        entry = db_session.query(AuditEntry).filter_by(ref_id=mv.id).one()
        assert entry.action == "stock.in"
        assert entry.scope == "chef"
        assert entry.chef_id == "chef_a"
        assert entry.actor == chef_a.id
        assert entry.meta["item"] == "100 ml Container"
        assert entry.meta["owner"] == "Chef A - South"
        assert entry.meta["quantity"] == 6
        assert entry.meta["note"] == "Delivery"

    def test_warehouse_movement_is_founder_scope(self, catalog, founder, db_session):
        mv = catalog.record_movement(founder, item_id="cnt_100ml", kind="IN", quantity=1)
        entry = db_session.query(AuditEntry).filter_by(ref_id=mv.id).one()
        assert entry.scope == "founder"
        assert entry.chef_id is None
        assert entry.meta["owner"] == "Warehouse"

    def test_rejected_movement_writes_nothing(self, catalog, founder, db_session):
        before = _audit_count(db_session)
        with pytest.raises(ValidationError):
            catalog.record_movement(founder, item_id="cnt_100ml", kind="IN", quantity=-1)

        assert _audit_count(db_session) == before
        assert db_session.query(StockMovement).count() == 0

    def test_denied_movement_writes_nothing(self, catalog, chef_a, db_session):
        before = _audit_count(db_session)
        with pytest.raises(PermissionDeniedError):
            catalog.record_movement(chef_a, item_id="cnt_100ml", kind="IN", quantity=1, chef_id="chef_b")

        assert _audit_count(db_session) == before
        assert db_session.query(StockMovement).count() == 0

    def test_update_records_changed_fields(self, catalog, founder, db_session):
        catalog.update_item(founder, "cnt_100ml", {"min_stock": 25, "sku": "CNT-100"})

        entry = db_session.query(AuditEntry).filter_by(action="catalog.item.update").one()
        assert entry.ref_id == "cnt_100ml"
        assert entry.meta["changed"] == ["min_stock", "sku"]

    def test_every_catalog_write_logs_one_entry(self, catalog, founder, db_session):
        writes = [
            (lambda: catalog.update_item(founder, "cnt_100ml", {"min_stock": 10}), "catalog.item.update", "cnt_100ml"),
            (lambda: catalog.update_vendor(founder, "vendor_alpha", {"phone": "1"}), "catalog.vendor.update", "vendor_alpha"),
            (lambda: catalog.update_chef(founder, "chef_a", {"phone": "2"}), "chef.update", "chef_a"),
            (lambda: catalog.delete_item(founder, "cnt_100ml"), "catalog.item.delete", "cnt_100ml"),
            (lambda: catalog.delete_vendor(founder, "vendor_alpha"), "catalog.vendor.delete", "vendor_alpha"),
            (lambda: catalog.delete_chef(founder, "chef_b"), "chef.delete", "chef_b"),
        ]
        for write, action, ref_id in writes:
            before = _audit_count(db_session)
            write()
            assert _audit_count(db_session) == before + 1

            entry = db_session.query(AuditEntry).filter_by(action=action).one()
            assert entry.ref_id == ref_id
            assert entry.scope == "founder"
            assert entry.chef_id is None


class TestOwnership:
    def test_chef_defaults_to_own_kitchen(self, catalog, chef_a):
        mv = catalog.record_movement(chef_a, item_id="cnt_200ml", kind="IN", quantity=4)
        assert mv.chef_id == "chef_a"

    def test_founder_defaults_to_warehouse(self, catalog, founder):
        mv = catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=4)
        assert mv.chef_id is None

    def test_founder_records_for_a_kitchen(self, catalog, founder):
        mv = catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=4, chef_id="chef_b")
        assert mv.chef_id == "chef_b"
        assert catalog.ledger.on_hand("cnt_200ml", "chef_b") == 4

    def test_chef_cannot_record_for_warehouse(self, catalog, chef_a):
        with pytest.raises(PermissionDeniedError):
            catalog.record_movement(chef_a, item_id="cnt_200ml", kind="IN", quantity=4, chef_id=None)

    def test_chef_cannot_manage_catalog(self, catalog, chef_a):
        with pytest.raises(PermissionDeniedError):
            catalog.create_item(chef_a, {"name": "Lid", "unit": "pcs"})
        with pytest.raises(PermissionDeniedError):
            catalog.update_vendor(chef_a, "vendor_alpha", {"phone": "1"})
        with pytest.raises(PermissionDeniedError):
            catalog.delete_chef(chef_a, "chef_b")

    def test_movement_of_other_kitchen_is_not_found(self, catalog, chef_a, chef_b):
        mv = catalog.record_movement(chef_b, item_id="cnt_200ml", kind="IN", quantity=4)
        with pytest.raises(NotFoundError):
            catalog.get_movement(chef_a, mv.id)
        with pytest.raises(NotFoundError):
            catalog.void_movement(chef_a, mv.id)

    def test_chef_lists_only_own_movements(self, catalog, founder, chef_a, chef_b):
        catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=10)
        catalog.record_movement(chef_a, item_id="cnt_200ml", kind="IN", quantity=4)
        catalog.record_movement(chef_b, item_id="cnt_200ml", kind="IN", quantity=2)

        assert {mv.chef_id for mv in catalog.list_movements(chef_a)} == {"chef_a"}
        assert len(catalog.list_movements(founder)) == 3
        assert len(catalog.list_movements(founder, None)) == 1
        with pytest.raises(PermissionDeniedError):
            catalog.list_movements(chef_a, "chef_b")

    def test_chef_sees_only_own_kitchen_row(self, catalog, chef_a):
        assert [c.id for c in catalog.list_chefs(chef_a)] == ["chef_a"]
        with pytest.raises(NotFoundError):
            catalog.get_chef(chef_a, "chef_b")


class TestVoid:
    def test_void_appends_reversal_and_audits(self, catalog, chef_a, db_session):
        mv = catalog.record_movement(chef_a, item_id="cnt_200ml", kind="IN", quantity=9)
        reversal = catalog.void_movement(chef_a, mv.id, note="Wrong kitchen")

        assert reversal.kind == "OUT"
        assert reversal.reverses_id == mv.id
        assert reversal.note == "Wrong kitchen"
        assert catalog.ledger.on_hand("cnt_200ml", "chef_a") == 0

        entry = db_session.query(AuditEntry).filter_by(action="stock.void").one()
        assert entry.ref_id == reversal.id
        assert entry.meta["voided_id"] == mv.id
        assert entry.meta["voided_kind"] == "IN"

    def test_second_void_rolls_back_cleanly(self, catalog, founder, db_session):
        mv = catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=9)
        catalog.void_movement(founder, mv.id)
        before = _audit_count(db_session)

        with pytest.raises(ValidationError):
            catalog.void_movement(founder, mv.id)
        assert _audit_count(db_session) == before


class TestDeletedReferences:
    def test_deleted_item_keeps_history_and_balance(self, catalog, founder, db_session):
        mv = catalog.record_movement(founder, item_id="cnt_100ml", kind="IN", quantity=7)
        catalog.delete_item(founder, "cnt_100ml")

        assert db_session.get(StockMovement, mv.id) is not None
        assert catalog.ledger.on_hand("cnt_100ml") == 7

        summary = catalog.owner_summary(founder, None)
        row = next(r for r in summary["totals"] if r["item_id"] == "cnt_100ml")
        assert row["item"] == "Unknown item (cnt_100ml)"
        assert row["quantity"] == 7

    def test_deleted_chef_label_falls_back_to_id(self, catalog, founder):
        catalog.record_movement(founder, item_id="cnt_100ml", kind="IN", quantity=2, chef_id="chef_b")
        catalog.delete_chef(founder, "chef_b")

        overview = catalog.overview(founder)
        names = {s["chef_id"]: s["name"] for s in overview["owners"]}
        assert names["chef_b"] == "chef_b"

    def test_delete_unknown_item(self, catalog, founder):
        with pytest.raises(NotFoundError):
            catalog.delete_item(founder, "missing")


class TestSummaries:
    def test_owner_summary_flags_low_stock(self, catalog, chef_a):
        catalog.record_movement(chef_a, item_id="cnt_200ml", kind="IN", quantity=45)
        catalog.record_movement(chef_a, item_id="cnt_100ml", kind="IN", quantity=10)
        catalog.record_movement(chef_a, item_id="cnt_100ml", kind="OUT", quantity=2)

        summary = catalog.owner_summary(chef_a)
        by_item = {r["item_id"]: r for r in summary["totals"]}

        assert summary["chef_id"] == "chef_a"
        assert by_item["cnt_200ml"]["low_stock"] is False
        assert by_item["cnt_100ml"]["quantity"] == 8
        assert by_item["cnt_100ml"]["low_stock"] is True
        assert summary["low_stock_count"] == 1
        assert summary["total_on_hand"] == 53
        assert summary["shipments_in"] == 2
        assert summary["shipments_out"] == 1

    def test_overview_covers_every_owner(self, catalog, founder):
        catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=120)
        catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=5, chef_id="ghost")

        overview = catalog.overview(founder)
        owners = [s["chef_id"] for s in overview["owners"]]

        assert owners[0] is None
        assert set(owners) == {None, "chef_a", "chef_b", "ghost"}
        assert overview["total_on_hand"] == 125

    def test_overview_is_founder_only(self, catalog, chef_a):
        with pytest.raises(PermissionDeniedError):
            catalog.overview(chef_a)

    def test_chef_cannot_read_other_kitchen_balance(self, catalog, chef_a):
        with pytest.raises(PermissionDeniedError):
            catalog.on_hand(chef_a, "cnt_200ml", "chef_b")
        with pytest.raises(PermissionDeniedError):
            catalog.owner_summary(chef_a, None)


class TestAuditVisibility:
    def test_chef_reads_only_own_entries(self, catalog, founder, chef_a, chef_b):
        catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=1)
        catalog.record_movement(chef_a, item_id="cnt_200ml", kind="IN", quantity=1)
        catalog.record_movement(chef_b, item_id="cnt_200ml", kind="IN", quantity=1)

        entries = catalog.list_audit(chef_a)
        assert len(entries) == 1
        assert entries[0].chef_id == "chef_a"
        # Five catalog entries plus three movements
        assert len(catalog.list_audit(founder)) == 8

    def test_newest_first(self, catalog, founder):
        catalog.record_movement(founder, item_id="cnt_200ml", kind="OUT", quantity=1)
        assert catalog.list_audit(founder, limit=1)[0].action == "stock.out"


def test_fresh_service_sees_committed_state(catalog, founder, db_session):
    catalog.record_movement(founder, item_id="cnt_200ml", kind="IN", quantity=3)
    assert InventoryService(db_session).on_hand(founder, "cnt_200ml") == 3
