import logging
from typing import Sequence

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recipebox import deps
from recipebox.lib import sharing
from recipebox.lib.audit import AuditSink
from recipebox.lib.authentication import UserData
from recipebox.lib.authorization import require_current_user
from recipebox.lib.logging import LoggedRoute
from recipebox.lib.logging.context import save_to_logging_context
from recipebox.lib.permissions import Action, assert_permission
from recipebox.lib.permissions.loaders import snapshot_for
from recipebox.models.share_grant import ShareGrant
from recipebox.models.share_link import ShareLink
from recipebox.routers.shared import (
    ACCESS_CONTROL_ERROR_RESPONSES,
    PUBLIC_ERROR_RESPONSES,
    ROUTER_BASE_PREFIX,
    STORAGE_ERROR_RESPONSES,
    VALIDATION_ERROR_RESPONSES,
    ResourceCollection,
    fetch_resource,
)
from recipebox.view_models import share

TAG_NAME = "Sharing"

router = APIRouter(
    prefix=ROUTER_BASE_PREFIX,
    tags=[TAG_NAME],
    responses={**PUBLIC_ERROR_RESPONSES, **ACCESS_CONTROL_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "Share recipes and binders with other users, or through bearer links.",
}

logger = logging.getLogger(__name__)


@router.get(
    "/{collection}/{resource_id}/shares",
    status_code=200,
    response_model=list[share.ShareGrant],
    summary="List the grants on a resource",
)
def list_shares(
    *,
    collection: ResourceCollection,
    resource_id: int,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Sequence[ShareGrant]:
    item = fetch_resource(db, collection, resource_id)
    assert_permission(user_data, snapshot_for(db, item), Action.SHARE)
    return sharing.list_grants(db, item)


@router.put(
    "/{collection}/{resource_id}/shares",
    status_code=200,
    response_model=share.ShareGrant,
    responses={**VALIDATION_ERROR_RESPONSES, **STORAGE_ERROR_RESPONSES},
    summary="Share a resource with a user",
)
def share_resource(
    *,
    collection: ResourceCollection,
    resource_id: int,
    grant: share.ShareGrantCreate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
    audit_sink: AuditSink = Depends(deps.get_audit_sink),
) -> ShareGrant:
    """
    Grant a user a permission level on a recipe or binder.

    Sharing again with the same user replaces the level of their existing grant, upgrading or downgrading it.
    A binder grant also applies to every recipe filed in the binder.
    """
    item = fetch_resource(db, collection, resource_id)
    grantee = sharing.find_grantee(db, grant.username)
    return sharing.share(db, user_data.user, item, grantee, grant.level, audit_sink=audit_sink)


@router.delete(
    "/{collection}/{resource_id}/shares/{username}",
    status_code=200,
    responses={**STORAGE_ERROR_RESPONSES},
    summary="Revoke a user's grant on a resource",
)
def revoke_share(
    *,
    collection: ResourceCollection,
    resource_id: int,
    username: str,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
    audit_sink: AuditSink = Depends(deps.get_audit_sink),
) -> None:
    """
    Revoke a user's grant. Revoking a grant that does not exist succeeds without change.
    """
    item = fetch_resource(db, collection, resource_id)
    grantee = sharing.find_grantee(db, username)
    sharing.revoke(db, user_data.user, item, grantee, audit_sink=audit_sink)


@router.get(
    "/{collection}/{resource_id}/links",
    status_code=200,
    response_model=list[share.ShareLink],
    summary="List the share links on a resource",
)
def list_links(
    *,
    collection: ResourceCollection,
    resource_id: int,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Sequence[ShareLink]:
    item = fetch_resource(db, collection, resource_id)
    assert_permission(user_data, snapshot_for(db, item), Action.SHARE)
    return sharing.list_links(db, item)


@router.post(
    "/{collection}/{resource_id}/links",
    status_code=200,
    response_model=share.NewShareLink,
    responses={**VALIDATION_ERROR_RESPONSES, **STORAGE_ERROR_RESPONSES},
    summary="Create a share link for a resource",
)
def create_share_link(
    *,
    collection: ResourceCollection,
    resource_id: int,
    link_create: share.ShareLinkCreate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
    audit_sink: AuditSink = Depends(deps.get_audit_sink),
) -> ShareLink:
    """
    Create a bearer link. The token is only returned in this response; present it in the ``X-Share-Token``
    header to use the link.
    """
    item = fetch_resource(db, collection, resource_id)
    return sharing.create_link(
        db, user_data.user, item, link_create.level, expires_at=link_create.expires_at, audit_sink=audit_sink
    )


@router.delete(
    "/{collection}/{resource_id}/links/{link_id}",
    status_code=200,
    responses={**STORAGE_ERROR_RESPONSES},
    summary="Revoke a share link",
)
def revoke_share_link(
    *,
    collection: ResourceCollection,
    resource_id: int,
    link_id: int,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
    audit_sink: AuditSink = Depends(deps.get_audit_sink),
) -> None:
    save_to_logging_context({"requested_link": link_id})
    item = fetch_resource(db, collection, resource_id)
    sharing.revoke_link(db, user_data.user, item, link_id, audit_sink=audit_sink)
