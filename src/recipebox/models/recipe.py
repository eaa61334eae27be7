from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, relationship

from recipebox.db.base import Base
from recipebox.models.binder_recipe import binder_recipes_association_table
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.user import User

if TYPE_CHECKING:
    from recipebox.models.binder import Binder


class Recipe(Base):
    __tablename__ = "recipes"

    resource_kind = ResourceKind.recipe

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    ingredients = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    servings = Column(Integer, nullable=True)
    image_url = Column(String, nullable=True)

    # Ownership is assigned at creation and never changes.
    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    owner: Mapped[User] = relationship("User", foreign_keys="Recipe.owner_id")
    modified_by_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    modified_by: Mapped[User] = relationship("User", foreign_keys="Recipe.modified_by_id")
    creation_time = Column(DateTime, nullable=False, default=datetime.now)
    modification_time = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    binders: Mapped[list["Binder"]] = relationship(
        "Binder",
        secondary=binder_recipes_association_table,
        back_populates="recipes",
    )
