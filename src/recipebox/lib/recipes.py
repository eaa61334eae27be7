import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from recipebox.lib.exceptions import NonexistentResourceError
from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.sharing import purge_share_records, storage_transaction
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.recipe import Recipe

logger = logging.getLogger(__name__)


def find_recipe(db: Session, recipe_id: int) -> Recipe:
    save_to_logging_context({"requested_recipe": recipe_id})
    item: Optional[Recipe] = db.scalars(select(Recipe).where(Recipe.id == recipe_id)).one_or_none()
    if item is None:
        logger.info(msg="The requested recipe does not exist.", extra=logging_context())
        raise NonexistentResourceError(f"recipe {recipe_id} not found")

    return item


def delete_recipe(db: Session, item: Recipe) -> None:
    """
    Delete a recipe together with its filings, grants and links.

    The binders it was filed in are left untouched apart from losing the recipe.
    """
    recipe_id = item.id
    with storage_transaction(db):
        item.binders.clear()
        purge_share_records(db, ResourceKind.recipe, recipe_id)
        db.delete(item)

    save_to_logging_context({"deleted_resource": f"recipe {recipe_id}"})
    logger.info(msg="Deleted recipe.", extra=logging_context())
