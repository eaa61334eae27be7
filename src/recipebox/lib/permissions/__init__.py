"""
Permission engine for recipes and binders.

Main Functions:
    resolve_effective_level: The highest level a subject holds on a resource, or None
    authorize: The single authorization chokepoint; raises Denied
    has_permission: Check if a user may perform an application action
    assert_permission: Assert an application action or raise Denied

Usage:
    >>> from recipebox.lib.permissions import Action, assert_permission
    >>> from recipebox.lib.permissions.loaders import snapshot_for
    >>>
    >>> assert_permission(user_data, snapshot_for(db, recipe), Action.UPDATE)
"""

from .actions import Action
from .core import assert_owner, assert_permission, authorize, has_permission, resolve_effective_level
from .exceptions import Denied, PermissionException

__all__ = [
    "Action",
    "Denied",
    "PermissionException",
    "assert_owner",
    "assert_permission",
    "authorize",
    "has_permission",
    "resolve_effective_level",
]
