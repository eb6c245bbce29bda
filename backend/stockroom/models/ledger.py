from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from .catalog import new_id


MOVEMENT_KINDS = ("IN", "OUT", "ADJUST")


class StockMovement(db.Model):
    """
    One append-only ledger entry: stock entering, leaving or being corrected
    for one item under one owner.

    OWNER KEY: (item_id, chef_id). chef_id NULL means the shared warehouse.
    quantity is always a positive magnitude; direction comes from kind.

    item_id / vendor_id / chef_id are opaque references (no foreign keys), so
    deleting a catalog row never invalidates history.

    IMMUTABLE: guarded by ORM listeners (see stockroom.immutability).
    Corrections are compensating movements pointing back via reverses_id.
    """
    __tablename__ = "stock_movements"
    __table_args__ = (
        db.Index("ix_movements_owner_item", "chef_id", "item_id"),
        db.Index("ix_movements_owner_seq", "chef_id", "seq"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    # Ledger append order; ties on timestamp are broken by seq
    seq = db.Column(db.Integer, nullable=False, index=True)

    item_id = db.Column(db.String(36), nullable=False, index=True)
    vendor_id = db.Column(db.String(36), nullable=True, index=True)
    chef_id = db.Column(db.String(36), nullable=True, index=True)

    kind = db.Column(db.String(8), nullable=False)
    quantity = db.Column(db.Float, nullable=False)
    unit_cost = db.Column(db.Float, nullable=True)
    note = db.Column(db.String(500), nullable=True)

    reverses_id = db.Column(db.String(36), nullable=True, index=True)
    actor_id = db.Column(db.String(128), nullable=True)

    timestamp = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        owner = self.chef_id or "warehouse"
        return f"<StockMovement id={self.id} {self.kind} {self.quantity} item={self.item_id} owner={owner}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "vendor_id": self.vendor_id,
            "chef_id": self.chef_id,
            "kind": self.kind,
            "quantity": self.quantity,
            "unit_cost": self.unit_cost,
            "note": self.note,
            "reverses_id": self.reverses_id,
            "actor_id": self.actor_id,
            "timestamp": to_utc_z(self.timestamp),
        }
