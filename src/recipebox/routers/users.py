import logging
from typing import Any, Sequence

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recipebox import deps
from recipebox.lib.authentication import UserData
from recipebox.lib.authorization import require_current_user
from recipebox.lib.logging import LoggedRoute
from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.sharing import list_grants_for_grantee
from recipebox.models.share_grant import ShareGrant
from recipebox.routers.shared import ACCESS_CONTROL_ERROR_RESPONSES, ROUTER_BASE_PREFIX, VALIDATION_ERROR_RESPONSES
from recipebox.view_models import share, user

TAG_NAME = "Users"

router = APIRouter(
    prefix=ROUTER_BASE_PREFIX,
    tags=[TAG_NAME],
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "The current user and what has been shared with them.",
}

logger = logging.getLogger(__name__)


@router.get("/users/me", status_code=200, response_model=user.CurrentUser)
async def show_me(*, user_data: UserData = Depends(require_current_user)) -> Any:
    """
    Return the current user.
    """
    return user_data.user


@router.put(
    "/users/me",
    status_code=200,
    response_model=user.CurrentUser,
    responses={**VALIDATION_ERROR_RESPONSES},
)
async def update_me(
    *,
    user_update: user.CurrentUserUpdate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Any:
    """
    Update the current user's name or email address.
    """
    changes = user_update.model_dump(exclude_unset=True, by_alias=False)
    for field, value in changes.items():
        setattr(user_data.user, field, value)

    db.add(user_data.user)
    db.commit()
    db.refresh(user_data.user)

    save_to_logging_context({"updated_fields": sorted(changes)})
    logger.info(msg="Updated current user.", extra=logging_context())
    return user_data.user


@router.get("/users/me/shared", status_code=200, response_model=list[share.ShareGrant])
def list_shared_with_me(
    *,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Sequence[ShareGrant]:
    """
    List the grants other users have given the current user, on recipes and binders alike.
    """
    return list_grants_for_grantee(db, user_data.user)
