# Overview: Pytest coverage for role-based visibility decisions.

"""
Access Policy Tests

SECURITY TESTS: The policy is pure, so these run without a database.
- Founder sees and records for every owner, warehouse included.
- A Home Chef sees and records only for their own kitchen.
- A chef without a kitchen id sees nothing.
"""

from types import SimpleNamespace

import pytest

from stockroom.services.access_policy import (
    CurrentUser,
    FOUNDER,
    HOME_CHEF,
    PermissionDeniedError,
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
    visible_owners,
)


MOVEMENTS = [
    SimpleNamespace(id="m1", chef_id=None),
    SimpleNamespace(id="m2", chef_id="chef_a"),
    SimpleNamespace(id="m3", chef_id="chef_b"),
    SimpleNamespace(id="m4", chef_id="chef_a"),
]

AUDIT = [
    SimpleNamespace(id="a1", scope="founder", chef_id=None),
    SimpleNamespace(id="a2", scope="chef", chef_id="chef_a"),
    SimpleNamespace(id="a3", scope="chef", chef_id="chef_b"),
    # Founder-scope entry that mentions a kitchen stays Founder-only
    SimpleNamespace(id="a4", scope="founder", chef_id="chef_a"),
]

CHEFS = [SimpleNamespace(id="chef_a"), SimpleNamespace(id="chef_b")]


class TestFounder:
    def test_manages_everything(self, founder):
        assert can_manage_catalog(founder)
        assert can_manage_vendor(founder)
        assert can_manage_chefs(founder)
        assert can_view_overview(founder)

    def test_sees_every_owner(self, founder):
        assert visible_owners(founder) is None
        assert can_view_owner(founder, None)
        assert can_view_owner(founder, "chef_a")
        assert can_record_for(founder, "chef_b")

    def test_filters_pass_everything(self, founder):
        assert [m.id for m in visible_movements(founder, MOVEMENTS)] == ["m1", "m2", "m3", "m4"]
        assert len(visible_audit(founder, AUDIT)) == 4
        assert len(visible_chefs(founder, CHEFS)) == 2


class TestHomeChef:
    def test_cannot_manage_catalog(self, chef_a):
        assert not can_manage_catalog(chef_a)
        assert not can_manage_vendor(chef_a, SimpleNamespace(id="vendor_alpha"))
        assert not can_manage_chefs(chef_a)
        assert not can_view_overview(chef_a)

    def test_owner_scope(self, chef_a):
        assert visible_owners(chef_a) == ["chef_a"]
        assert can_view_owner(chef_a, "chef_a")
        assert not can_view_owner(chef_a, "chef_b")
        assert not can_view_owner(chef_a, None)
        assert can_record_for(chef_a, "chef_a")
        assert not can_record_for(chef_a, None)

    def test_movements_filtered_to_own_kitchen(self, chef_a, chef_b):
        assert [m.id for m in visible_movements(chef_a, MOVEMENTS)] == ["m2", "m4"]
        assert [m.id for m in visible_movements(chef_b, MOVEMENTS)] == ["m3"]

    def test_audit_filtered_to_own_chef_scope(self, chef_a):
        assert [e.id for e in visible_audit(chef_a, AUDIT)] == ["a2"]

    def test_kitchen_directory(self, chef_a):
        assert [c.id for c in visible_chefs(chef_a, CHEFS)] == ["chef_a"]


class TestChefWithoutKitchen:
    @pytest.fixture
    def orphan(self):
        return CurrentUser(id="orphan", role=HOME_CHEF)

    def test_sees_nothing(self, orphan):
        assert visible_owners(orphan) == []
        assert visible_movements(orphan, MOVEMENTS) == []
        assert visible_audit(orphan, AUDIT) == []
        assert visible_chefs(orphan, CHEFS) == []
        # None is the warehouse, not "my kitchen"
        assert not can_view_owner(orphan, None)


def test_require_raises_permission_denied():
    require(True)
    with pytest.raises(PermissionDeniedError, match="nope"):
        require(False, "nope")


def test_current_user_is_immutable():
    user = CurrentUser(id="u", role=FOUNDER)
    with pytest.raises(AttributeError):
        user.role = HOME_CHEF
