"""
Share grants and share links.

Each mutating operation here is one transaction: it re-checks the acting subject's rights against a fresh
snapshot, writes, commits, and only then emits its audit record. Nothing is retried; a storage failure is
rolled back and surfaced as :class:`~recipebox.lib.exceptions.StorageUnavailable`.
"""

import logging
import os
import secrets
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipebox.lib.audit import AuditRecord, AuditSink, default_audit_sink
from recipebox.lib.exceptions import InvalidExpiry, InvalidGrantee, InvalidLevel, ShareForbidden, StorageUnavailable
from recipebox.lib.logging.context import format_raised_exception_info_as_dict, logging_context, save_to_logging_context
from recipebox.lib.permissions import Denied, authorize, resolve_effective_level
from recipebox.lib.permissions.loaders import Resource, snapshot_for
from recipebox.lib.permissions.snapshots import ResourceSnapshot, as_aware
from recipebox.models.enums.audit_action import AuditAction
from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.share_grant import ShareGrant, utc_now
from recipebox.models.share_link import ShareLink
from recipebox.models.user import User

SHARE_LINK_TOKEN_BYTES = int(os.getenv("SHARE_LINK_TOKEN_BYTES", 32))

GRANT_CONFLICT_KEYS = ["resource_kind", "resource_id", "grantee_id"]

logger = logging.getLogger(__name__)


def _require_admin(db: Session, actor: User, item: Resource) -> tuple[ResourceSnapshot, PermissionLevel]:
    snapshot = snapshot_for(db, item)
    try:
        authorize(actor.id, snapshot, PermissionLevel.admin)
    except Denied as exc:
        logger.info(msg="Rejected share operation; Actor does not hold admin.", extra=logging_context())
        raise ShareForbidden(f"admin permission on {snapshot.describe()} is required to manage sharing") from exc

    # authorize() guarantees a level is present.
    return snapshot, resolve_effective_level(actor.id, snapshot)  # type: ignore[return-value]


def _check_level(actor_level: PermissionLevel, level: PermissionLevel, snapshot: ResourceSnapshot) -> None:
    if level > actor_level:
        save_to_logging_context({"requested_level": level.value, "actor_level": actor_level.value})
        logger.info(msg="Rejected share operation; Requested level exceeds actor's level.", extra=logging_context())
        raise InvalidLevel(f"cannot grant {level.value} on {snapshot.describe()} while holding {actor_level.value}")


@contextmanager
def storage_transaction(db: Session) -> Iterator[None]:
    """Commit the writes made in the block as one unit, or roll them back and raise StorageUnavailable."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        save_to_logging_context(format_raised_exception_info_as_dict(exc))
        logger.error(msg="Operation failed in the storage layer; Rolled back.", extra=logging_context())
        raise StorageUnavailable("the database is currently unavailable") from exc


def _upsert_grant(db: Session, values: dict[str, Any]) -> None:
    """Insert or update the single grant row for (resource, grantee) in one statement."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(ShareGrant).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(ShareGrant).values(**values)
    else:
        raise NotImplementedError(f"Atomic grant upsert is not implemented for the '{dialect}' dialect.")

    stmt = stmt.on_conflict_do_update(
        index_elements=GRANT_CONFLICT_KEYS,
        set_={
            "level": stmt.excluded.level,
            "granted_by_id": stmt.excluded.granted_by_id,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    db.execute(stmt)


def find_grantee(db: Session, username: str) -> User:
    grantee = db.scalars(select(User).where(User.username == username)).one_or_none()
    if grantee is None:
        save_to_logging_context({"grantee": username})
        logger.info(msg="Rejected share operation; Grantee does not exist.", extra=logging_context())
        raise InvalidGrantee(f"no user found with username '{username}'")

    return grantee


def share(
    db: Session,
    granter: User,
    item: Resource,
    grantee: User,
    level: PermissionLevel,
    audit_sink: AuditSink = default_audit_sink,
) -> ShareGrant:
    """
    Grant *grantee* the given *level* on *item*, or change the level of their existing grant.

    Raises:
        ShareForbidden: The granter does not hold admin on the item.
        InvalidGrantee: The grantee owns the item.
        InvalidLevel: The level exceeds the granter's own effective level.
        StorageUnavailable: The write could not be committed.
    """
    snapshot, granter_level = _require_admin(db, granter, item)
    save_to_logging_context({"grantee": grantee.id, "requested_level": level.value})

    if grantee.id == snapshot.owner_id:
        logger.info(msg="Rejected share operation; Grantee owns the resource.", extra=logging_context())
        raise InvalidGrantee(f"user '{grantee.username}' owns {snapshot.describe()} and already holds every permission")

    _check_level(granter_level, level, snapshot)

    now = utc_now()
    with storage_transaction(db):
        _upsert_grant(
            db,
            {
                "resource_kind": snapshot.kind,
                "resource_id": snapshot.id,
                "grantee_id": grantee.id,
                "level": level,
                "granted_by_id": granter.id,
                "created_at": now,
                "updated_at": now,
            },
        )

    grant = db.scalars(
        select(ShareGrant).where(
            ShareGrant.resource_kind == snapshot.kind,
            ShareGrant.resource_id == snapshot.id,
            ShareGrant.grantee_id == grantee.id,
        )
    ).one()

    audit_sink.emit(
        AuditRecord(
            actor_id=granter.id,
            action=AuditAction.share,
            resource_kind=snapshot.kind,
            resource_id=snapshot.id,
            grantee_id=grantee.id,
            level=level,
            timestamp=now,
        )
    )
    logger.info(msg="Shared resource.", extra=logging_context())
    return grant


def revoke(
    db: Session,
    revoker: User,
    item: Resource,
    grantee: User,
    audit_sink: AuditSink = default_audit_sink,
) -> None:
    """
    Remove *grantee*'s direct grant on *item*. Succeeds without change if there is no such grant.

    Revoking a binder grant only removes the binder grant; access to the binder's recipes disappears with it.
    """
    snapshot, _ = _require_admin(db, revoker, item)
    save_to_logging_context({"grantee": grantee.id})

    with storage_transaction(db):
        result = db.execute(
            delete(ShareGrant).where(
                ShareGrant.resource_kind == snapshot.kind,
                ShareGrant.resource_id == snapshot.id,
                ShareGrant.grantee_id == grantee.id,
            )
        )

    save_to_logging_context({"grant_removed": bool(result.rowcount)})  # type: ignore[attr-defined]
    audit_sink.emit(
        AuditRecord(
            actor_id=revoker.id,
            action=AuditAction.revoke,
            resource_kind=snapshot.kind,
            resource_id=snapshot.id,
            grantee_id=grantee.id,
        )
    )
    logger.info(msg="Revoked share.", extra=logging_context())


def create_link(
    db: Session,
    creator: User,
    item: Resource,
    level: PermissionLevel,
    expires_at: Optional[datetime] = None,
    audit_sink: AuditSink = default_audit_sink,
) -> ShareLink:
    """
    Mint a bearer link granting *level* on *item* to anyone presenting its token, until *expires_at*.
    """
    snapshot, creator_level = _require_admin(db, creator, item)
    _check_level(creator_level, level, snapshot)

    if expires_at is not None and as_aware(expires_at) <= utc_now():
        raise InvalidExpiry("a share link cannot expire in the past")

    link = ShareLink(
        token=secrets.token_urlsafe(SHARE_LINK_TOKEN_BYTES),
        resource_kind=snapshot.kind,
        resource_id=snapshot.id,
        level=level,
        created_by_id=creator.id,
        expires_at=expires_at,
    )
    with storage_transaction(db):
        db.add(link)
    db.refresh(link)

    audit_sink.emit(
        AuditRecord(
            actor_id=creator.id,
            action=AuditAction.create_link,
            resource_kind=snapshot.kind,
            resource_id=snapshot.id,
            level=level,
        )
    )
    save_to_logging_context({"created_link": link.id})
    logger.info(msg="Created share link.", extra=logging_context())
    return link


def revoke_link(
    db: Session,
    revoker: User,
    item: Resource,
    link_id: int,
    audit_sink: AuditSink = default_audit_sink,
) -> None:
    """Delete a share link on *item*. Succeeds without change if the link is already gone."""
    snapshot, _ = _require_admin(db, revoker, item)

    with storage_transaction(db):
        db.execute(
            delete(ShareLink).where(
                ShareLink.id == link_id,
                ShareLink.resource_kind == snapshot.kind,
                ShareLink.resource_id == snapshot.id,
            )
        )

    audit_sink.emit(
        AuditRecord(
            actor_id=revoker.id,
            action=AuditAction.revoke_link,
            resource_kind=snapshot.kind,
            resource_id=snapshot.id,
        )
    )
    logger.info(msg="Revoked share link.", extra=logging_context())


def list_grants(db: Session, item: Resource) -> Sequence[ShareGrant]:
    return db.scalars(
        select(ShareGrant)
        .where(ShareGrant.resource_kind == item.resource_kind, ShareGrant.resource_id == item.id)
        .order_by(ShareGrant.id)
    ).all()


def list_links(db: Session, item: Resource) -> Sequence[ShareLink]:
    return db.scalars(
        select(ShareLink)
        .where(ShareLink.resource_kind == item.resource_kind, ShareLink.resource_id == item.id)
        .order_by(ShareLink.id)
    ).all()


def list_grants_for_grantee(db: Session, grantee: User) -> Sequence[ShareGrant]:
    return db.scalars(select(ShareGrant).where(ShareGrant.grantee_id == grantee.id).order_by(ShareGrant.id)).all()


def purge_share_records(db: Session, kind: ResourceKind, resource_id: int) -> None:
    """Remove every grant and link on a resource. Does not commit; used when the resource itself is deleted."""
    db.execute(delete(ShareGrant).where(ShareGrant.resource_kind == kind, ShareGrant.resource_id == resource_id))
    db.execute(delete(ShareLink).where(ShareLink.resource_kind == kind, ShareLink.resource_id == resource_id))
