from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from recipebox.view_models import record_type_validator, set_record_type
from recipebox.view_models.base.base import BaseModel
from recipebox.view_models.user import User


class RecipeBase(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    ingredients: Optional[str] = None
    instructions: Optional[str] = None
    servings: Optional[int] = Field(default=None, gt=0)
    image_url: Optional[str] = None


class RecipeCreate(RecipeBase):
    pass


class RecipeModify(BaseModel):
    # Only fields the client sends are applied.
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    ingredients: Optional[str] = None
    instructions: Optional[str] = None
    servings: Optional[int] = Field(default=None, gt=0)
    image_url: Optional[str] = None

    @field_validator("title")
    def title_is_not_cleared(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("A recipe title cannot be removed.")
        return v


class SavedRecipe(RecipeBase):
    record_type: str = None  # type: ignore
    id: int
    owner: User
    modified_by: Optional[User] = None
    creation_time: datetime
    modification_time: datetime

    _record_type_factory = record_type_validator()(set_record_type)

    class Config:
        from_attributes = True


class Recipe(SavedRecipe):
    pass


class ShortRecipe(BaseModel):
    """A recipe as listed inside a binder."""

    record_type: str = None  # type: ignore
    id: int
    title: str
    owner: User

    _record_type_factory = record_type_validator()(set_record_type)

    class Config:
        from_attributes = True
