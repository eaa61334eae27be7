from datetime import datetime
from typing import Optional

from pydantic import Field

from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.view_models import record_type_validator, set_record_type
from recipebox.view_models.base.base import BaseModel
from recipebox.view_models.user import User


class ShareGrantCreate(BaseModel):
    username: str = Field(description="Username of the user receiving the grant.")
    level: PermissionLevel


class SavedShareGrant(BaseModel):
    record_type: str = None  # type: ignore
    id: int
    resource_kind: ResourceKind
    resource_id: int
    grantee: User
    level: PermissionLevel
    granted_by: User
    created_at: datetime
    updated_at: datetime

    _record_type_factory = record_type_validator()(set_record_type)

    class Config:
        from_attributes = True


class ShareGrant(SavedShareGrant):
    pass


class ShareLinkCreate(BaseModel):
    level: PermissionLevel
    expires_at: Optional[datetime] = Field(
        default=None, description="Links without an expiry stay valid until revoked."
    )


class SavedShareLink(BaseModel):
    record_type: str = None  # type: ignore
    id: int
    resource_kind: ResourceKind
    resource_id: int
    level: PermissionLevel
    created_by: User
    created_at: datetime
    expires_at: Optional[datetime] = None

    _record_type_factory = record_type_validator()(set_record_type)

    class Config:
        from_attributes = True


# Listed links never expose their bearer token.
class ShareLink(SavedShareLink):
    pass


# Returned once, when the link is created.
class NewShareLink(SavedShareLink):
    token: str
