"""
fuel_services.audit -- Append-only audit trail.

Responsibility:
    Record who did what and when: shift commits, sign-offs, revisions,
    demo seeding.  Entries are append-only and exposed newest first.

Architecture position:
    Services -- in-memory collaborator.  Durable storage is out of scope;
    callers wanting persistence forward entries from ``entries()``.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from fuel_kernel.domain.clock import Clock, SystemClock
from fuel_kernel.domain.model import AuditLog
from fuel_kernel.logging_config import get_logger

logger = get_logger("services.audit")


class AuditAction:
    """Audit action names."""

    SHIFT_COMMIT = "SHIFT_COMMIT"
    RECON_APPROVED = "RECON_APPROVED"
    RECON_REVISED = "RECON_REVISED"
    SYS_SEED = "SYS_SEED"


class AuditTrail:
    """
    In-memory append-only audit log.

    Guarantees:
        - ``record`` never rewrites or drops an earlier entry.
        - ``entries()`` returns newest first.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()
        self._entries: list[AuditLog] = []

    def record(
        self,
        action: str,
        details: str,
        user_id: str,
        timestamp: datetime | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            id=uuid4().hex[:9],
            action=action,
            user_id=user_id,
            details=details,
            timestamp=timestamp or self._clock.now(),
        )
        self._entries.append(entry)

        logger.info("audit_recorded", extra={
            "audit_id": entry.id,
            "action": action,
            "user_id": user_id,
        })
        return entry

    def entries(self, action: str | None = None) -> tuple[AuditLog, ...]:
        """All entries newest first, optionally filtered by action."""
        items = reversed(self._entries)
        if action is not None:
            return tuple(e for e in items if e.action == action)
        return tuple(items)

    def __len__(self) -> int:
        return len(self._entries)
