"""
Read-only views of ownership and share records, as consumed by the permission engine.

The engine never touches storage. Callers build these snapshots (see :mod:`recipebox.lib.permissions.loaders`)
and hand them in; every decision is a pure function of the snapshot it was given.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from recipebox.models.enums.permission_level import PermissionLevel, highest_level
from recipebox.models.enums.resource_kind import ResourceKind


def as_aware(moment: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class GrantSnapshot:
    grantee_id: int
    level: PermissionLevel


@dataclass(frozen=True)
class LinkSnapshot:
    resource_kind: ResourceKind
    resource_id: int
    level: PermissionLevel
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return as_aware(self.expires_at) <= as_aware(now or datetime.now(timezone.utc))


@dataclass(frozen=True)
class ResourceSnapshot:
    kind: ResourceKind
    id: int
    owner_id: int
    grants: tuple[GrantSnapshot, ...] = ()
    # Binders currently containing this recipe. Always empty for binders.
    binders: tuple["ResourceSnapshot", ...] = ()

    def __post_init__(self):
        if self.kind == ResourceKind.binder and self.binders:
            raise ValueError("Binder snapshots cannot be contained in other binders.")
        if any(binder.kind != ResourceKind.binder for binder in self.binders):
            raise ValueError("A recipe may only inherit grants from binders.")

    def grant_for(self, subject_id: int) -> Optional[PermissionLevel]:
        # The storage layer guarantees one grant per grantee, but be exact if handed duplicates.
        return highest_level(grant.level for grant in self.grants if grant.grantee_id == subject_id)

    @property
    def binder_ids(self) -> frozenset[int]:
        return frozenset(binder.id for binder in self.binders)

    def describe(self) -> str:
        return f"{self.kind.value} {self.id}"
