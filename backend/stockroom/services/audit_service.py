# Overview: Audit Recorder; append-only log of state-changing actions.

from __future__ import annotations

from typing import Optional

from sqlalchemy import func

from ..models import AuditEntry, AUDIT_ACTIONS, AUDIT_SCOPES
from ..time_utils import utcnow
from ..validation import ValidationError
"""
Stockroom Audit Invariants (authoritative)

- Append-only; rows are never updated or deleted (ORM listeners enforce it).
- No domain logic here and no interception: the orchestration layer calls
  log() explicitly after each successful write, inside the same DB
  transaction, so a rolled-back write never leaves an entry behind.
- Nothing reads audit rows to make decisions.
"""


class AuditRecorder:
    def __init__(self, session):
        self.session = session

    def log(
        self,
        *,
        actor: str,
        action: str,
        scope: str,
        chef_id: Optional[str] = None,
        ref_id: Optional[str] = None,
        meta: Optional[dict] = None,
    ) -> AuditEntry:
        if not isinstance(actor, str) or not actor.strip():
            raise ValidationError("actor is required")
        if action not in AUDIT_ACTIONS:
            raise ValidationError(f"unknown audit action: {action}")
        if scope not in AUDIT_SCOPES:
            raise ValidationError(f"scope must be one of: {', '.join(AUDIT_SCOPES)}")
        if meta is not None and not isinstance(meta, dict):
            raise ValidationError("meta must be an object")
        if scope == "chef" and not chef_id:
            raise ValidationError("chef scope requires chef_id")
        if scope == "founder" and chef_id is not None:
            raise ValidationError("founder scope cannot carry chef_id")

        entry = AuditEntry(
            seq=self._next_seq(),
            actor=actor.strip(),
            action=action,
            scope=scope,
            chef_id=chef_id,
            ref_id=ref_id,
            meta=meta,
            timestamp=utcnow(),
        )
        self.session.add(entry)
        self.session.flush()  # ensures entry.id is assigned without committing
        return entry

    def _next_seq(self) -> int:
        current = self.session.query(func.coalesce(func.max(AuditEntry.seq), 0)).scalar()
        return int(current or 0) + 1

    def entries(self, *, limit: Optional[int] = None) -> list[AuditEntry]:
        q = self.session.query(AuditEntry).order_by(
            AuditEntry.timestamp.desc(),
            AuditEntry.seq.desc(),
        )
        if limit is not None:
            q = q.limit(limit)
        return q.all()

    def entries_for_chef(self, chef_id: str, *, limit: Optional[int] = None) -> list[AuditEntry]:
        q = self.session.query(AuditEntry).filter(
            AuditEntry.scope == "chef",
            AuditEntry.chef_id == chef_id,
        ).order_by(AuditEntry.timestamp.desc(), AuditEntry.seq.desc())
        if limit is not None:
            q = q.limit(limit)
        return q.all()

    def count(self) -> int:
        return self.session.query(AuditEntry).count()
