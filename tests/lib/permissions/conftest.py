"""Shared fixtures and helpers for permissions tests."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
from unittest.mock import Mock

import pytest

from recipebox.lib.permissions.actions import Action
from recipebox.lib.permissions.snapshots import GrantSnapshot, LinkSnapshot, ResourceSnapshot
from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind

OWNER_ID = 1
GRANTEE_ID = 2
BINDER_GRANTEE_ID = 3
OTHER_USER_ID = 4

RECIPE_ID = 10
BINDER_ID = 20
OTHER_BINDER_ID = 21

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class PermissionTest:
    """A single parametrized permission case.

    Args:
        kind: "recipe" or "binder"
        user_type: "owner", "grantee", "binder_grantee", "other_user", "anonymous"
        action: Action enum value
        should_be_permitted: True/False for normal cases, "NotImplementedError" for unsupported actions
        grant_level: Level of the direct grant held by "grantee"
        binder_grant_level: Level of the grant "binder_grantee" holds on the containing binder
        expected_code: HTTP error code when denied
    """

    kind: str
    user_type: str
    action: Action
    should_be_permitted: Union[bool, str]
    grant_level: Optional[PermissionLevel] = None
    binder_grant_level: Optional[PermissionLevel] = None
    expected_code: Optional[int] = None
    description: Optional[str] = None


class EntityTestHelper:
    """Builds snapshots and user data with consistent ids."""

    @staticmethod
    def create_user_data(user_type: str):
        user_ids = {
            "owner": OWNER_ID,
            "grantee": GRANTEE_ID,
            "binder_grantee": BINDER_GRANTEE_ID,
            "other_user": OTHER_USER_ID,
        }

        if user_type == "anonymous":
            return None

        if user_type not in user_ids:
            raise ValueError(f"Unknown user type: {user_type}")

        return Mock(user=Mock(id=user_ids[user_type], username=user_type))

    @staticmethod
    def create_binder(
        grants: Optional[dict[int, PermissionLevel]] = None,
        binder_id: int = BINDER_ID,
        owner_id: int = OWNER_ID,
    ):
        return ResourceSnapshot(
            kind=ResourceKind.binder,
            id=binder_id,
            owner_id=owner_id,
            grants=tuple(GrantSnapshot(grantee_id=grantee, level=level) for grantee, level in (grants or {}).items()),
        )

    @staticmethod
    def create_recipe(
        grants: Optional[dict[int, PermissionLevel]] = None,
        binders: tuple[ResourceSnapshot, ...] = (),
        owner_id: int = OWNER_ID,
    ):
        return ResourceSnapshot(
            kind=ResourceKind.recipe,
            id=RECIPE_ID,
            owner_id=owner_id,
            grants=tuple(GrantSnapshot(grantee_id=grantee, level=level) for grantee, level in (grants or {}).items()),
            binders=binders,
        )

    @staticmethod
    def create_link(
        kind: ResourceKind,
        resource_id: int,
        level: PermissionLevel,
        expires_in: Optional[timedelta] = None,
    ):
        return LinkSnapshot(
            resource_kind=kind,
            resource_id=resource_id,
            level=level,
            expires_at=NOW + expires_in if expires_in is not None else None,
        )

    @classmethod
    def create_for_test(cls, test_case: PermissionTest) -> ResourceSnapshot:
        """Build the snapshot described by a test case: a resource, optionally filed in a shared binder."""
        grants = {GRANTEE_ID: test_case.grant_level} if test_case.grant_level is not None else {}

        if test_case.kind == "binder":
            if test_case.binder_grant_level is not None:
                grants[BINDER_GRANTEE_ID] = test_case.binder_grant_level
            return cls.create_binder(grants)

        binders: tuple[ResourceSnapshot, ...] = ()
        if test_case.binder_grant_level is not None:
            binders = (cls.create_binder({BINDER_GRANTEE_ID: test_case.binder_grant_level}),)
        return cls.create_recipe(grants, binders)


@pytest.fixture
def entity_helper():
    return EntityTestHelper()
