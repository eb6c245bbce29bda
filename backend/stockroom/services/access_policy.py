"""
Visibility / access policy.

Pure decisions over (current user, resource). No state, no side effects,
no database access: every function is a predicate or a filter over what it
is handed.

ROLES:
- Founder: manages the catalog (items, vendors, chefs), sees every owner,
  records movements for the warehouse or any kitchen.
- Home Chef: scoped to one kitchen (chef_id). Sees only that kitchen's
  movements and audit entries, records movements only for it. Warehouse
  rows are never visible to a chef.

Vendors are global and Founder-managed, so no chef can manage a vendor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


FOUNDER = "Founder"
HOME_CHEF = "Home Chef"
ROLES = (FOUNDER, HOME_CHEF)


class PermissionDeniedError(Exception):
    """The current user may not perform the requested mutation or read."""


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: str
    chef_id: Optional[str] = None

    @property
    def is_founder(self) -> bool:
        return self.role == FOUNDER


def can_manage_catalog(user: CurrentUser) -> bool:
    return user.is_founder


def can_manage_vendor(user: CurrentUser, vendor=None) -> bool:
    # Global vendors: ownership never grants rights to a chef
    return user.is_founder


def can_manage_chefs(user: CurrentUser) -> bool:
    return user.is_founder


def can_view_overview(user: CurrentUser) -> bool:
    """The all-owners view leaks other kitchens' stock, so it is Founder-only."""
    return user.is_founder


def can_view_owner(user: CurrentUser, chef_id: Optional[str]) -> bool:
    if user.is_founder:
        return True
    return user.chef_id is not None and chef_id == user.chef_id


def can_record_for(user: CurrentUser, chef_id: Optional[str]) -> bool:
    """Founder records for anyone (warehouse included); a chef only for their own kitchen."""
    return can_view_owner(user, chef_id)


def visible_owners(user: CurrentUser) -> Optional[list[str]]:
    """None means every owner; otherwise the explicit list of chef ids."""
    if user.is_founder:
        return None
    return [user.chef_id] if user.chef_id is not None else []


def visible_chefs(user: CurrentUser, chefs: Iterable) -> list:
    """Kitchen directory: all for the Founder, only their own row for a chef."""
    if user.is_founder:
        return list(chefs)
    return [c for c in chefs if user.chef_id is not None and c.id == user.chef_id]


def visible_movements(user: CurrentUser, movements: Iterable) -> list:
    if user.is_founder:
        return list(movements)
    if user.chef_id is None:
        return []
    return [mv for mv in movements if mv.chef_id == user.chef_id]


def visible_audit(user: CurrentUser, entries: Iterable) -> list:
    if user.is_founder:
        return list(entries)
    if user.chef_id is None:
        return []
    return [e for e in entries if e.scope == "chef" and e.chef_id == user.chef_id]


def require(allowed: bool, message: str = "Permission denied") -> None:
    if not allowed:
        raise PermissionDeniedError(message)
