import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from recipebox.lib.exceptions import NonexistentResourceError
from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.sharing import purge_share_records, storage_transaction
from recipebox.models.binder import Binder
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.recipe import Recipe
from recipebox.models.user import User

logger = logging.getLogger(__name__)


def find_binder(db: Session, binder_id: int) -> Binder:
    save_to_logging_context({"requested_binder": binder_id})
    item: Optional[Binder] = db.scalars(select(Binder).where(Binder.id == binder_id)).one_or_none()
    if item is None:
        logger.info(msg="The requested binder does not exist.", extra=logging_context())
        raise NonexistentResourceError(f"binder {binder_id} not found")

    return item


def file_recipe(db: Session, binder: Binder, recipe: Recipe, modified_by: User) -> Binder:
    """File *recipe* in *binder*. Filing a recipe that is already present changes nothing."""
    if recipe not in binder.recipes:
        binder.recipes.append(recipe)
        binder.modified_by = modified_by
        db.add(binder)
        db.commit()
        db.refresh(binder)

    save_to_logging_context({"filed_recipe": recipe.id})
    return binder


def unfile_recipe(db: Session, binder: Binder, recipe: Recipe, modified_by: User) -> Binder:
    if recipe in binder.recipes:
        binder.recipes.remove(recipe)
        binder.modified_by = modified_by
        db.add(binder)
        db.commit()
        db.refresh(binder)

    save_to_logging_context({"unfiled_recipe": recipe.id})
    return binder


def delete_binder(db: Session, item: Binder) -> None:
    """
    Delete a binder with its grants and links. Recipes filed in it are preserved.
    """
    binder_id = item.id
    with storage_transaction(db):
        item.recipes.clear()
        purge_share_records(db, ResourceKind.binder, binder_id)
        db.delete(item)

    save_to_logging_context({"deleted_resource": f"binder {binder_id}"})
    logger.info(msg="Deleted binder.", extra=logging_context())
