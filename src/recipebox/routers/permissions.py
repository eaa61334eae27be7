import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recipebox import deps
from recipebox.lib.authentication import UserData, get_current_user
from recipebox.lib.logging import LoggedRoute
from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.permissions import resolve_effective_level
from recipebox.lib.permissions.loaders import snapshot_for
from recipebox.lib.permissions.snapshots import LinkSnapshot
from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.routers.shared import (
    PUBLIC_ERROR_RESPONSES,
    ROUTER_BASE_PREFIX,
    ResourceCollection,
    fetch_resource,
    get_share_link,
)
from recipebox.view_models.permission import EffectiveLevel

TAG_NAME = "Permissions"

router = APIRouter(
    prefix=f"{ROUTER_BASE_PREFIX}/permissions",
    tags=[TAG_NAME],
    responses={**PUBLIC_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "Inspect the caller's permissions on recipes and binders.",
}

logger = logging.getLogger(__name__)


@router.get(
    "/{collection}/{resource_id}",
    status_code=200,
    response_model=EffectiveLevel,
    summary="Get the caller's effective level on a resource",
)
def get_effective_level(
    *,
    collection: ResourceCollection,
    resource_id: int,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
    link: Optional[LinkSnapshot] = Depends(get_share_link),
) -> EffectiveLevel:
    """
    The highest level the caller holds on a resource, combining ownership, grants, binder grants and any
    presented share link. The level is null when the caller has no access at all.
    """
    item = fetch_resource(db, collection, resource_id)
    subject_id = user_data.user.id if user_data is not None else None
    level = resolve_effective_level(subject_id, snapshot_for(db, item), link)
    return EffectiveLevel(resource_kind=collection.kind, resource_id=item.id, level=level)


@router.get(
    "/user-is-permitted/{collection}/{resource_id}/{level}",
    status_code=200,
    response_model=bool,
    summary="Check whether the caller holds a permission level on a resource",
)
def check_permission(
    *,
    collection: ResourceCollection,
    resource_id: int,
    level: PermissionLevel,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
    link: Optional[LinkSnapshot] = Depends(get_share_link),
) -> bool:
    item = fetch_resource(db, collection, resource_id)
    subject_id = user_data.user.id if user_data is not None else None
    effective = resolve_effective_level(subject_id, snapshot_for(db, item), link)

    permitted = effective is not None and effective >= level
    save_to_logging_context({"required_level": level.value, "permitted": permitted})
    logger.debug(msg="Checked caller's permission level.", extra=logging_context())
    return permitted
