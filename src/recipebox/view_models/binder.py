from datetime import datetime
from typing import Optional, Sequence

from pydantic import Field, field_validator

from recipebox.view_models import record_type_validator, set_record_type
from recipebox.view_models.base.base import BaseModel
from recipebox.view_models.recipe import ShortRecipe
from recipebox.view_models.user import User


class BinderBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class BinderCreate(BinderBase):
    pass


class BinderModify(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None

    @field_validator("name")
    def name_is_not_cleared(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("A binder name cannot be removed.")
        return v


class AddRecipeToBinderRequest(BaseModel):
    recipe_id: int


class SavedBinder(BinderBase):
    record_type: str = None  # type: ignore
    id: int
    owner: User
    modified_by: Optional[User] = None
    creation_time: datetime
    modification_time: datetime

    _record_type_factory = record_type_validator()(set_record_type)

    class Config:
        from_attributes = True


class Binder(SavedBinder):
    # Only the recipes the requesting subject may read are listed.
    recipes: Sequence[ShortRecipe] = []
