"""
The permission engine.

Every authorization decision in the application flows through :func:`authorize` (or the owner check in
:func:`assert_owner`). :func:`has_permission` and :func:`assert_permission` are thin wrappers which translate an
application :class:`~recipebox.lib.permissions.actions.Action` into the level it requires.

Effective level of a subject on a resource is the highest of:

1. ``admin``, if the subject owns the resource;
2. the subject's direct grant on the resource;
3. for recipes only, the subject's level on any binder currently containing the recipe: ``admin`` if they own
   the binder, otherwise their grant on it (one hop, no further);
4. the level of a valid, unexpired share link scoped to the resource, or for recipes, to a binder containing it.
"""

import logging
from datetime import datetime
from typing import Optional

from recipebox.lib.authentication import UserData
from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.permissions.actions import REQUIRED_LEVELS, Action
from recipebox.lib.permissions.exceptions import Denied, PermissionException
from recipebox.lib.permissions.models import PermissionResponse
from recipebox.lib.permissions.snapshots import LinkSnapshot, ResourceSnapshot
from recipebox.models.enums.permission_level import PermissionLevel, highest_level
from recipebox.models.enums.resource_kind import ResourceKind

logger = logging.getLogger(__name__)


def link_applies(link: LinkSnapshot, resource: ResourceSnapshot, now: Optional[datetime] = None) -> bool:
    if link.is_expired(now):
        return False

    if link.resource_kind == resource.kind and link.resource_id == resource.id:
        return True

    # A binder link reaches the recipes filed in that binder, at the link's own level.
    return (
        resource.kind == ResourceKind.recipe
        and link.resource_kind == ResourceKind.binder
        and link.resource_id in resource.binder_ids
    )


def resolve_effective_level(
    subject_id: Optional[int],
    resource: ResourceSnapshot,
    link: Optional[LinkSnapshot] = None,
    now: Optional[datetime] = None,
) -> Optional[PermissionLevel]:
    """
    Compute the highest level *subject_id* holds on *resource*, or ``None`` if it holds no access at all.

    Pass ``subject_id=None`` for anonymous callers; they can only gain access through *link*. This function
    never mutates anything and may be called freely.
    """
    candidates: list[Optional[PermissionLevel]] = []

    if subject_id is not None:
        if resource.owner_id == subject_id:
            return PermissionLevel.admin

        candidates.append(resource.grant_for(subject_id))
        # Owning a binder counts as holding admin on it, so filed recipes inherit admin for the binder owner.
        candidates.extend(
            PermissionLevel.admin if binder.owner_id == subject_id else binder.grant_for(subject_id)
            for binder in resource.binders
        )

    if link is not None and link_applies(link, resource, now):
        candidates.append(link.level)

    return highest_level(candidates)


def authorize(
    subject_id: Optional[int],
    resource: ResourceSnapshot,
    required: PermissionLevel,
    link: Optional[LinkSnapshot] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Succeed silently iff the subject's effective level on *resource* is at least *required*.

    Raises:
        Denied: With http code 401 when there is neither a subject nor a usable link, 403 otherwise.
    """
    effective = resolve_effective_level(subject_id, resource, link, now)
    save_to_logging_context(
        {
            "requested_resource": resource.describe(),
            "required_level": required.value,
            "effective_level": effective.value if effective is not None else None,
        }
    )

    if effective is not None and effective >= required:
        return

    logger.debug(msg="Effective level is insufficient for the requested operation.", extra=logging_context())
    if subject_id is None and effective is None:
        raise Denied(401, f"authentication required to access {resource.describe()}")
    raise Denied(403, f"insufficient permissions on {resource.describe()}")


def assert_owner(subject_id: Optional[int], resource: ResourceSnapshot) -> None:
    """Owner-only operations (deletion) are not grantable at any level."""
    save_to_logging_context({"requested_resource": resource.describe(), "owner_required": True})

    if subject_id is None:
        raise Denied(401, f"authentication required to access {resource.describe()}")
    if resource.owner_id != subject_id:
        raise Denied(403, f"only the owner may perform this action on {resource.describe()}")


def _subject_id(user_data: Optional[UserData]) -> Optional[int]:
    return user_data.user.id if user_data is not None else None


def has_permission(
    user_data: Optional[UserData],
    resource: ResourceSnapshot,
    action: Action,
    link: Optional[LinkSnapshot] = None,
) -> PermissionResponse:
    """
    Check whether the user may perform *action* on *resource*.

    Args:
        user_data: The authenticated user, or None for anonymous callers.
        resource: Snapshot of the resource's ownership and grants.
        action: The application action being attempted.
        link: A share link presented with the request, if any.

    Returns:
        PermissionResponse: Whether the action is permitted, with an HTTP code and message when it is not.

    Raises:
        NotImplementedError: If *action* does not apply to this kind of resource.
    """
    try:
        assert_permission(user_data, resource, action, link)
    except PermissionException as exc:
        return PermissionResponse(False, exc.http_code, exc.message)

    return PermissionResponse(True)


def assert_permission(
    user_data: Optional[UserData],
    resource: ResourceSnapshot,
    action: Action,
    link: Optional[LinkSnapshot] = None,
) -> None:
    """
    Assert that the user may perform *action* on *resource*, raising :class:`Denied` otherwise.
    """
    supported = REQUIRED_LEVELS[resource.kind]
    if action not in supported:
        raise NotImplementedError(
            f"Action '{action.value}' is not supported for {resource.kind.value} resources. "
            f"Supported actions: {', '.join(a.value for a in supported)}"
        )

    save_to_logging_context({"permission_boundary": action.name})
    required = supported[action]
    if required is None:
        assert_owner(_subject_id(user_data), resource)
    else:
        authorize(_subject_id(user_data), resource, required, link)
