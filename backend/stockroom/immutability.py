"""
ORM-level immutability for ledger and audit rows.

Stock movements and audit entries are append-only. Once flushed, any UPDATE
or DELETE issued through the ORM is rejected before SQL reaches the
database. Corrections are new rows (compensating movements), never edits.

Bulk statements built with ``table.delete()`` bypass these listeners; only
test fixtures use them.
"""

from __future__ import annotations

from sqlalchemy import event, inspect


class ImmutableRecordError(Exception):
    """Attempted to modify or delete an append-only record."""

    def __init__(self, entity_type: str, entity_id, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(f"{entity_type} {entity_id} is immutable: {reason}")


def _changed_fields(target) -> list[str]:
    state = inspect(target)
    return [attr.key for attr in state.attrs if attr.history.has_changes()]


def _reject_update(mapper, connection, target):
    # before_update also fires for dirty objects with no net change
    changed = _changed_fields(target)
    if changed:
        raise ImmutableRecordError(
            mapper.class_.__name__,
            target.id,
            f"attempted to change {', '.join(sorted(changed))}",
        )


def _reject_delete(mapper, connection, target):
    raise ImmutableRecordError(mapper.class_.__name__, target.id, "rows cannot be deleted")


def register_immutability_listeners() -> None:
    """Attach the guards; safe to call from every create_app()."""
    from .models import StockMovement, AuditEntry

    for model in (StockMovement, AuditEntry):
        if not event.contains(model, "before_update", _reject_update):
            event.listen(model, "before_update", _reject_update)
        if not event.contains(model, "before_delete", _reject_delete):
            event.listen(model, "before_delete", _reject_delete)
