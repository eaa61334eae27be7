"""
Storage adapter for the permission engine: builds snapshots from the database.

This is the only part of the permission package that performs I/O. Snapshots are built fresh per call and
never cached across requests, so an authorization decision always reflects a recent view of the grants.
"""

from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from recipebox.lib.permissions.snapshots import GrantSnapshot, LinkSnapshot, ResourceSnapshot
from recipebox.models.binder import Binder
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.recipe import Recipe
from recipebox.models.share_grant import ShareGrant
from recipebox.models.share_link import ShareLink

Resource = Union[Recipe, Binder]


def _grants_by_resource(db: Session, kind: ResourceKind, resource_ids: list[int]) -> dict[int, list[GrantSnapshot]]:
    grouped: dict[int, list[GrantSnapshot]] = {resource_id: [] for resource_id in resource_ids}
    if not resource_ids:
        return grouped

    rows = db.execute(
        select(ShareGrant.resource_id, ShareGrant.grantee_id, ShareGrant.level).where(
            ShareGrant.resource_kind == kind, ShareGrant.resource_id.in_(resource_ids)
        )
    ).all()
    for resource_id, grantee_id, level in rows:
        grouped[resource_id].append(GrantSnapshot(grantee_id=grantee_id, level=level))

    return grouped


def snapshot_for(db: Session, item: Resource) -> ResourceSnapshot:
    """Build the snapshot of a recipe (with its containing binders) or of a binder."""
    kind: ResourceKind = item.resource_kind
    grants = _grants_by_resource(db, kind, [item.id])[item.id]

    binder_snapshots: tuple[ResourceSnapshot, ...] = ()
    if isinstance(item, Recipe):
        binders = list(item.binders)
        binder_grants = _grants_by_resource(db, ResourceKind.binder, [binder.id for binder in binders])
        binder_snapshots = tuple(
            ResourceSnapshot(
                kind=ResourceKind.binder,
                id=binder.id,
                owner_id=binder.owner_id,
                grants=tuple(binder_grants[binder.id]),
            )
            for binder in binders
        )

    return ResourceSnapshot(
        kind=kind, id=item.id, owner_id=item.owner_id, grants=tuple(grants), binders=binder_snapshots
    )


def link_snapshot(link: ShareLink) -> LinkSnapshot:
    return LinkSnapshot(
        resource_kind=link.resource_kind,
        resource_id=link.resource_id,
        level=link.level,
        expires_at=link.expires_at,
    )


def link_snapshot_for_token(db: Session, token: Optional[str]) -> Optional[LinkSnapshot]:
    """Look up a presented share-link token. Unknown tokens are treated as no link at all."""
    if not token:
        return None

    link = db.scalars(select(ShareLink).where(ShareLink.token == token)).one_or_none()
    return link_snapshot(link) if link is not None else None
