from enum import Enum
from typing import Optional

from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind


class Action(Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    SHARE = "share"
    ADD_RECIPE = "add_recipe"
    REMOVE_RECIPE = "remove_recipe"
    FILE_IN_BINDER = "file_in_binder"


# Level each action requires. ``None`` marks owner-only actions.
REQUIRED_LEVELS: dict[ResourceKind, dict[Action, Optional[PermissionLevel]]] = {
    ResourceKind.recipe: {
        Action.READ: PermissionLevel.view,
        Action.UPDATE: PermissionLevel.edit,
        Action.DELETE: None,
        Action.SHARE: PermissionLevel.admin,
        # Filing a recipe exposes it to everyone holding a grant on the binder.
        Action.FILE_IN_BINDER: PermissionLevel.admin,
    },
    ResourceKind.binder: {
        Action.READ: PermissionLevel.view,
        Action.UPDATE: PermissionLevel.edit,
        Action.DELETE: None,
        Action.SHARE: PermissionLevel.admin,
        Action.ADD_RECIPE: PermissionLevel.edit,
        Action.REMOVE_RECIPE: PermissionLevel.edit,
    },
}
