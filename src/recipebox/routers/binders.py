import logging
from typing import Any, Optional, Sequence

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from recipebox import deps
from recipebox.lib.authentication import UserData, get_current_user
from recipebox.lib.authorization import require_current_user
from recipebox.lib.binders import delete_binder as delete_binder_record
from recipebox.lib.binders import file_recipe, find_binder, unfile_recipe
from recipebox.lib.logging import LoggedRoute
from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.permissions import Action, assert_permission, has_permission
from recipebox.lib.permissions.loaders import snapshot_for
from recipebox.lib.permissions.snapshots import LinkSnapshot
from recipebox.lib.recipes import find_recipe
from recipebox.models.binder import Binder
from recipebox.routers.shared import (
    ACCESS_CONTROL_ERROR_RESPONSES,
    PUBLIC_ERROR_RESPONSES,
    ROUTER_BASE_PREFIX,
    VALIDATION_ERROR_RESPONSES,
    get_share_link,
)
from recipebox.view_models import binder
from recipebox.view_models.recipe import ShortRecipe

TAG_NAME = "Binders"

router = APIRouter(
    prefix=ROUTER_BASE_PREFIX,
    tags=[TAG_NAME],
    responses={**PUBLIC_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "Manage binders and the recipes filed in them.",
}

logger = logging.getLogger(__name__)


def binder_response(
    db: Session, user_data: Optional[UserData], item: Binder, link: Optional[LinkSnapshot] = None
) -> binder.Binder:
    """
    Serialize a binder, listing only the recipes the requesting subject may read.

    Recipes are filtered on the response model; the binder's relationship is never modified here.
    """
    response = binder.Binder.model_validate(item)
    response.recipes = [
        ShortRecipe.model_validate(filed)
        for filed in item.recipes
        if has_permission(user_data, snapshot_for(db, filed), Action.READ, link)
    ]
    return response


@router.get(
    "/users/me/binders",
    status_code=200,
    response_model=list[binder.Binder],
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="List my binders",
)
def list_my_binders(
    *,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Sequence[binder.Binder]:
    """
    List the binders owned by the current user.
    """
    items = db.scalars(select(Binder).where(Binder.owner_id == user_data.user.id).order_by(Binder.id)).all()
    return [binder_response(db, user_data, item) for item in items]


@router.get(
    "/binders/{binder_id}",
    status_code=200,
    response_model=binder.Binder,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="Fetch a binder",
)
def fetch_binder(
    *,
    binder_id: int,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
    link: Optional[LinkSnapshot] = Depends(get_share_link),
) -> binder.Binder:
    """
    Fetch a single binder with the recipes filed in it that the caller may read.
    """
    item = find_binder(db, binder_id)
    assert_permission(user_data, snapshot_for(db, item), Action.READ, link)
    return binder_response(db, user_data, item, link)


@router.post(
    "/binders/",
    status_code=200,
    response_model=binder.Binder,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="Create a binder",
)
def create_binder(
    *,
    item_create: binder.BinderCreate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> binder.Binder:
    """
    Create an empty binder owned by the current user.
    """
    item = Binder(**item_create.model_dump(by_alias=False), owner=user_data.user, modified_by=user_data.user)
    db.add(item)
    db.commit()
    db.refresh(item)

    save_to_logging_context({"created_resource": f"binder {item.id}"})
    logger.info(msg="Created binder.", extra=logging_context())
    return binder_response(db, user_data, item)


@router.patch(
    "/binders/{binder_id}",
    status_code=200,
    response_model=binder.Binder,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="Update a binder",
)
def update_binder(
    *,
    binder_id: int,
    item_update: binder.BinderModify,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
    link: Optional[LinkSnapshot] = Depends(get_share_link),
) -> binder.Binder:
    item = find_binder(db, binder_id)
    assert_permission(user_data, snapshot_for(db, item), Action.UPDATE, link)

    changes: dict[str, Any] = item_update.model_dump(exclude_unset=True, by_alias=False)
    for field, value in changes.items():
        setattr(item, field, value)

    item.modified_by = user_data.user if user_data is not None else None
    db.add(item)
    db.commit()
    db.refresh(item)

    save_to_logging_context({"updated_fields": sorted(changes)})
    logger.info(msg="Updated binder.", extra=logging_context())
    return binder_response(db, user_data, item, link)


@router.post(
    "/binders/{binder_id}/recipes",
    status_code=200,
    response_model=binder.Binder,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="File a recipe in a binder",
)
def add_recipe_to_binder(
    *,
    binder_id: int,
    body: binder.AddRecipeToBinderRequest,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> binder.Binder:
    """
    File a recipe in a binder.

    Requires edit permission on the binder and admin permission on the recipe, since every user the binder is
    shared with gains access to the recipe.
    """
    item = find_binder(db, binder_id)
    assert_permission(user_data, snapshot_for(db, item), Action.ADD_RECIPE)

    filed = find_recipe(db, body.recipe_id)
    assert_permission(user_data, snapshot_for(db, filed), Action.FILE_IN_BINDER)

    item = file_recipe(db, item, filed, user_data.user)
    logger.info(msg="Filed recipe in binder.", extra=logging_context())
    return binder_response(db, user_data, item)


@router.delete(
    "/binders/{binder_id}/recipes/{recipe_id}",
    status_code=200,
    response_model=binder.Binder,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="Remove a recipe from a binder",
)
def remove_recipe_from_binder(
    *,
    binder_id: int,
    recipe_id: int,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> binder.Binder:
    """
    Remove a recipe from a binder. The recipe itself is not deleted.
    """
    item = find_binder(db, binder_id)
    assert_permission(user_data, snapshot_for(db, item), Action.REMOVE_RECIPE)

    filed = find_recipe(db, recipe_id)
    item = unfile_recipe(db, item, filed, user_data.user)
    logger.info(msg="Removed recipe from binder.", extra=logging_context())
    return binder_response(db, user_data, item)


@router.delete(
    "/binders/{binder_id}",
    status_code=200,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="Delete a binder",
)
def delete_binder(
    *,
    binder_id: int,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> None:
    """
    Delete a binder. Only its owner may delete it; the recipes filed in it are kept.
    """
    item = find_binder(db, binder_id)
    assert_permission(user_data, snapshot_for(db, item), Action.DELETE)
    delete_binder_record(db, item)
