from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, relationship

from recipebox.db.base import Base
from recipebox.models.binder_recipe import binder_recipes_association_table
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.recipe import Recipe
from recipebox.models.user import User


class Binder(Base):
    __tablename__ = "binders"

    resource_kind = ResourceKind.binder

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)

    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    owner: Mapped[User] = relationship("User", foreign_keys="Binder.owner_id")
    modified_by_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    modified_by: Mapped[User] = relationship("User", foreign_keys="Binder.modified_by_id")
    creation_time = Column(DateTime, nullable=False, default=datetime.now)
    modification_time = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    recipes: Mapped[list[Recipe]] = relationship(
        "Recipe",
        secondary=binder_recipes_association_table,
        back_populates="binders",
    )
