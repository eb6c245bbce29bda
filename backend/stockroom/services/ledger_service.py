# Overview: Movement Ledger; append-only stock movements and on-hand derivation.

from __future__ import annotations

import math
from collections import defaultdict
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from sqlalchemy import func

from ..models import StockMovement, MOVEMENT_KINDS
from ..time_utils import utcnow
from ..validation import NotFoundError, ValidationError, coerce_number
"""
Stockroom Ledger Invariants (authoritative)

Storage:
- Stock is never stored as a balance. It is derived from StockMovement rows.
- Rows are append-only; ORM listeners reject UPDATE/DELETE (see immutability).
- Each row's owner key is (item_id, chef_id); chef_id None is the warehouse.

Fold:
- on_hand(item, owner) = fsum(sign(kind) * quantity) over rows with that key.
- sign(IN) = +1, sign(OUT) = -1, sign(ADJUST) = 0.
  ADJUST rows are recorded (and audited) as count/correction notes but do not
  move the balance; a correction that changes stock is expressed as an IN or
  OUT of the delta.
- fsum makes the result independent of append order, including for
  fractional quantities.
- Negative on-hand is allowed: an OUT larger than the balance is accepted.

Voids:
- A movement is never deleted. void_movement() appends a compensating row of
  the opposite kind with reverses_id set. A row can be reversed once, and a
  reversal cannot itself be voided.

Caching:
- on_hand_by_key() folds the whole ledger once and memoizes the result on
  this ledger instance until the next append. The memo is an optimization:
  rebuild() always re-derives from rows.
"""


_SIGNS = {"IN": 1.0, "OUT": -1.0, "ADJUST": 0.0}
_REVERSAL_KIND = {"IN": "OUT", "OUT": "IN", "ADJUST": "ADJUST"}


def signed_quantity(kind: str, quantity: float) -> float:
    """Contribution of one movement to its owner key's balance."""
    return _SIGNS[kind] * quantity


def fold_movements(movements: Iterable) -> dict[tuple[str, Optional[str]], float]:
    """
    Pure fold: (item_id, chef_id) -> on-hand for any iterable of objects with
    item_id, chef_id, kind and quantity attributes.
    """
    parts: dict[tuple[str, Optional[str]], list[float]] = defaultdict(list)
    for mv in movements:
        parts[(mv.item_id, mv.chef_id)].append(signed_quantity(mv.kind, mv.quantity))
    # + 0.0 turns -0.0 into 0.0
    return {key: math.fsum(values) + 0.0 for key, values in parts.items()}


def validate_kind(kind) -> str:
    if kind not in MOVEMENT_KINDS:
        raise ValidationError(f"kind must be one of: {', '.join(MOVEMENT_KINDS)}")
    return kind


def validate_quantity(quantity) -> float:
    if quantity is None:
        raise ValidationError("quantity is required")
    value = coerce_number("quantity", quantity)
    if value <= 0:
        raise ValidationError("quantity must be a positive number")
    return value


def validate_unit_cost(unit_cost) -> Optional[float]:
    if unit_cost is None:
        return None
    value = coerce_number("unit_cost", unit_cost)
    if value < 0:
        raise ValidationError("unit_cost must be >= 0")
    return value


def _optional_ref(name: str, value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    value = value.strip()
    return value or None


class MovementLedger:
    def __init__(self, session):
        self.session = session
        self._on_hand: Optional[Mapping] = None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def record_movement(
        self,
        *,
        item_id: str,
        kind: str,
        quantity,
        chef_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
        note: Optional[str] = None,
        unit_cost=None,
        actor_id: Optional[str] = None,
        reverses_id: Optional[str] = None,
    ) -> StockMovement:
        """
        Append one movement. All validation happens before anything is added
        to the session, so a rejected call leaves no row behind.
        """
        item_id = _optional_ref("item_id", item_id)
        if item_id is None:
            raise ValidationError("item_id is required")
        kind = validate_kind(kind)
        quantity = validate_quantity(quantity)
        unit_cost = validate_unit_cost(unit_cost)
        chef_id = _optional_ref("chef_id", chef_id)
        vendor_id = _optional_ref("vendor_id", vendor_id)
        note = _optional_ref("note", note)
        if note is not None and len(note) > 500:
            raise ValidationError("note exceeds max length 500")

        mv = StockMovement(
            seq=self._next_seq(),
            item_id=item_id,
            vendor_id=vendor_id,
            chef_id=chef_id,
            kind=kind,
            quantity=quantity,
            unit_cost=unit_cost,
            note=note,
            actor_id=actor_id,
            reverses_id=reverses_id,
            timestamp=utcnow(),
        )
        self.session.add(mv)
        self.session.flush()
        self.invalidate()
        return mv

    def void_movement(
        self,
        movement_id: str,
        *,
        actor_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> StockMovement:
        """Append the compensating movement for movement_id."""
        original = self.get_movement(movement_id)
        if original.reverses_id is not None:
            raise ValidationError("a reversal cannot be voided")
        already = (
            self.session.query(StockMovement.id)
            .filter(StockMovement.reverses_id == original.id)
            .first()
        )
        if already is not None:
            raise ValidationError(f"movement {original.id} is already voided")

        return self.record_movement(
            item_id=original.item_id,
            kind=_REVERSAL_KIND[original.kind],
            quantity=original.quantity,
            chef_id=original.chef_id,
            vendor_id=original.vendor_id,
            unit_cost=original.unit_cost,
            note=note or f"Void of {original.id}",
            actor_id=actor_id,
            reverses_id=original.id,
        )

    def _next_seq(self) -> int:
        current = self.session.query(func.coalesce(func.max(StockMovement.seq), 0)).scalar()
        return int(current or 0) + 1

    # ------------------------------------------------------------------
    # Derived balances
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        self._on_hand = None

    def rebuild(self) -> Mapping[tuple[str, Optional[str]], float]:
        rows = self.session.query(
            StockMovement.item_id,
            StockMovement.chef_id,
            StockMovement.kind,
            StockMovement.quantity,
        ).all()
        self._on_hand = MappingProxyType(fold_movements(rows))
        return self._on_hand

    def on_hand_by_key(self) -> Mapping[tuple[str, Optional[str]], float]:
        if self._on_hand is None:
            return self.rebuild()
        return self._on_hand

    def on_hand(self, item_id: str, chef_id: Optional[str] = None) -> float:
        return self.on_hand_by_key().get((item_id, chef_id), 0.0)

    def owners(self) -> set[Optional[str]]:
        """Every owner key that appears in the ledger (None = warehouse)."""
        return {chef_id for (_, chef_id) in self.on_hand_by_key().keys()}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_movement(self, movement_id: str) -> StockMovement:
        mv = self.session.get(StockMovement, movement_id) if movement_id else None
        if mv is None:
            raise NotFoundError(f"StockMovement {movement_id} not found")
        return mv

    def _newest_first(self, q, limit: Optional[int]):
        q = q.order_by(StockMovement.timestamp.desc(), StockMovement.seq.desc())
        if limit is not None:
            q = q.limit(limit)
        return q.all()

    def movements_for(self, chef_id: Optional[str], *, limit: Optional[int] = None) -> list[StockMovement]:
        """One owner's rows; chef_id None returns warehouse rows only."""
        q = self.session.query(StockMovement)
        if chef_id is None:
            q = q.filter(StockMovement.chef_id.is_(None))
        else:
            q = q.filter(StockMovement.chef_id == chef_id)
        return self._newest_first(q, limit)

    def all_movements(self, *, limit: Optional[int] = None) -> list[StockMovement]:
        return self._newest_first(self.session.query(StockMovement), limit)
