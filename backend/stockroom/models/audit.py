from __future__ import annotations

import copy

from ..extensions import db
from ..time_utils import to_utc_z
from .catalog import new_id


AUDIT_SCOPES = ("founder", "chef")

AUDIT_ACTIONS = frozenset({
    "catalog.item.create",
    "catalog.item.update",
    "catalog.item.delete",
    "catalog.vendor.create",
    "catalog.vendor.update",
    "catalog.vendor.delete",
    "chef.create",
    "chef.update",
    "chef.delete",
    "stock.in",
    "stock.out",
    "stock.adjust",
    "stock.void",
})


class AuditEntry(db.Model):
    """
    Append-only record of one state-changing action.

    Observability only: no component reads audit rows to make decisions.
    """
    __tablename__ = "audit_entries"
    __table_args__ = (
        db.Index("ix_audit_scope_chef_seq", "scope", "chef_id", "seq"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    seq = db.Column(db.Integer, nullable=False, index=True)

    actor = db.Column(db.String(128), nullable=False, index=True)
    action = db.Column(db.String(64), nullable=False, index=True)
    scope = db.Column(db.String(16), nullable=False)
    chef_id = db.Column(db.String(36), nullable=True, index=True)

    # Usually the triggering movement or catalog row
    ref_id = db.Column(db.String(36), nullable=True, index=True)
    meta = db.Column(db.JSON, nullable=True)

    timestamp = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "actor": self.actor,
            "action": self.action,
            "scope": self.scope,
            "chef_id": self.chef_id,
            "ref_id": self.ref_id,
            "meta": copy.deepcopy(self.meta),
            "timestamp": to_utc_z(self.timestamp),
        }
