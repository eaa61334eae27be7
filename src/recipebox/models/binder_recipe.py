from sqlalchemy import Column, ForeignKey, Table

from recipebox.db.base import Base

# A recipe may be filed in any number of binders. Deleting either side removes only the filing.
binder_recipes_association_table = Table(
    "binder_recipes",
    Base.metadata,
    Column("binder_id", ForeignKey("binders.id", ondelete="CASCADE"), primary_key=True),
    Column("recipe_id", ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True, index=True),
)
