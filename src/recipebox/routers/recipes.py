import logging
from typing import Any, Optional, Sequence

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from recipebox import deps
from recipebox.lib.authentication import UserData, get_current_user
from recipebox.lib.authorization import require_current_user
from recipebox.lib.logging import LoggedRoute
from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.permissions import Action, assert_permission
from recipebox.lib.permissions.loaders import snapshot_for
from recipebox.lib.permissions.snapshots import LinkSnapshot
from recipebox.lib.recipes import delete_recipe as delete_recipe_record
from recipebox.lib.recipes import find_recipe
from recipebox.models.recipe import Recipe
from recipebox.routers.shared import (
    ACCESS_CONTROL_ERROR_RESPONSES,
    PUBLIC_ERROR_RESPONSES,
    ROUTER_BASE_PREFIX,
    VALIDATION_ERROR_RESPONSES,
    get_share_link,
)
from recipebox.view_models import recipe

TAG_NAME = "Recipes"

router = APIRouter(
    prefix=ROUTER_BASE_PREFIX,
    tags=[TAG_NAME],
    responses={**PUBLIC_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "Create, read, update and delete recipes.",
}

logger = logging.getLogger(__name__)


@router.get(
    "/users/me/recipes",
    status_code=200,
    response_model=list[recipe.Recipe],
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="List my recipes",
)
def list_my_recipes(
    *,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Sequence[Recipe]:
    """
    List the recipes owned by the current user.
    """
    return db.scalars(select(Recipe).where(Recipe.owner_id == user_data.user.id).order_by(Recipe.id)).all()


@router.get(
    "/recipes/{recipe_id}",
    status_code=200,
    response_model=recipe.Recipe,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="Fetch a recipe",
)
def fetch_recipe(
    *,
    recipe_id: int,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
    link: Optional[LinkSnapshot] = Depends(get_share_link),
) -> Recipe:
    """
    Fetch a single recipe. Anonymous callers may read a recipe by presenting a share link token.
    """
    item = find_recipe(db, recipe_id)
    assert_permission(user_data, snapshot_for(db, item), Action.READ, link)
    return item


@router.post(
    "/recipes/",
    status_code=200,
    response_model=recipe.Recipe,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="Create a recipe",
)
def create_recipe(
    *,
    item_create: recipe.RecipeCreate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Recipe:
    """
    Create a recipe owned by the current user.
    """
    item = Recipe(
        **item_create.model_dump(by_alias=False),
        owner=user_data.user,
        modified_by=user_data.user,
    )
    db.add(item)
    db.commit()
    db.refresh(item)

    save_to_logging_context({"created_resource": f"recipe {item.id}"})
    logger.info(msg="Created recipe.", extra=logging_context())
    return item


@router.patch(
    "/recipes/{recipe_id}",
    status_code=200,
    response_model=recipe.Recipe,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="Update a recipe",
)
def update_recipe(
    *,
    recipe_id: int,
    item_update: recipe.RecipeModify,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
    link: Optional[LinkSnapshot] = Depends(get_share_link),
) -> Recipe:
    """
    Modify the fields of a recipe. Fields omitted from the request body are left unchanged.
    """
    item = find_recipe(db, recipe_id)
    assert_permission(user_data, snapshot_for(db, item), Action.UPDATE, link)

    changes: dict[str, Any] = item_update.model_dump(exclude_unset=True, by_alias=False)
    for field, value in changes.items():
        setattr(item, field, value)

    item.modified_by = user_data.user if user_data is not None else None
    db.add(item)
    db.commit()
    db.refresh(item)

    save_to_logging_context({"updated_fields": sorted(changes)})
    logger.info(msg="Updated recipe.", extra=logging_context())
    return item


@router.delete(
    "/recipes/{recipe_id}",
    status_code=200,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="Delete a recipe",
)
def delete_recipe(
    *,
    recipe_id: int,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> None:
    """
    Delete a recipe. Only its owner may delete it; it is removed from every binder it was filed in.
    """
    item = find_recipe(db, recipe_id)
    assert_permission(user_data, snapshot_for(db, item), Action.DELETE)
    delete_recipe_record(db, item)
