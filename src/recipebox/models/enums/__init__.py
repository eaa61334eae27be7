"""
Enums used by Recipebox models.
"""

from .audit_action import AuditAction
from .permission_level import PermissionLevel
from .resource_kind import ResourceKind

__all__ = [
    "AuditAction",
    "PermissionLevel",
    "ResourceKind",
]
