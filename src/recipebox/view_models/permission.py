from typing import Optional

from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.view_models.base.base import BaseModel


class EffectiveLevel(BaseModel):
    resource_kind: ResourceKind
    resource_id: int
    level: Optional[PermissionLevel] = None
