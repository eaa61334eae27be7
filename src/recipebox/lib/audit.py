"""
Audit records for share state changes.

Every successful share, revoke, link creation and link revocation produces exactly one :class:`AuditRecord`,
handed synchronously to an :class:`AuditSink` once the change has been committed. Sinks only receive records;
storing and querying them is the sink's business.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from recipebox.lib.logging.models import LogType
from recipebox.models.enums.audit_action import AuditAction
from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind

logger = logging.getLogger("recipebox.audit")


@dataclass(frozen=True)
class AuditRecord:
    actor_id: int
    action: AuditAction
    resource_kind: ResourceKind
    resource_id: int
    grantee_id: Optional[int] = None
    level: Optional[PermissionLevel] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_log_extra(self) -> dict[str, Any]:
        return {
            "audit_actor": self.actor_id,
            "audit_action": self.action.value,
            "audit_resource_kind": self.resource_kind.value,
            "audit_resource_id": self.resource_id,
            "audit_grantee": self.grantee_id,
            "audit_level": self.level.value if self.level is not None else None,
            "audit_timestamp": self.timestamp.isoformat(),
        }


class AuditSink(Protocol):
    def emit(self, record: AuditRecord) -> None: ...


class LoggingAuditSink:
    """Writes each record as a canonical line on the ``recipebox.audit`` logger."""

    def emit(self, record: AuditRecord) -> None:
        logger.info(
            msg=f"{record.action.value} on {record.resource_kind.value} {record.resource_id}.",
            extra={**record.as_log_extra(), "log_type": LogType.audit, "canonical": True},
        )


class MemoryAuditSink:
    """Keeps records in a list, in emission order."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    def emit(self, record: AuditRecord) -> None:
        self.records.append(record)


default_audit_sink = LoggingAuditSink()
