from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import field_validator

from recipebox.view_models import record_type_validator, set_record_type
from recipebox.view_models.base.base import BaseModel


class UserBase(BaseModel):
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class SavedUser(UserBase):
    record_type: str = None  # type: ignore

    _record_type_factory = record_type_validator()(set_record_type)

    class Config:
        from_attributes = True


# Properties visible to any authenticated user, e.g. as the grantee of a share.
class User(SavedUser):
    pass


# Properties returned to the user about themselves.
class CurrentUser(SavedUser):
    id: int
    email: Optional[str] = None
    is_first_login: bool
    date_joined: Optional[datetime] = None


class CurrentUserUpdate(BaseModel):
    """Fields a user may change about themselves."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("email")
    def validate_email_syntax(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None

        try:
            normalized_email = validate_email(v, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(str(exc))

        return normalized_email.normalized
