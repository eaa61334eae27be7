"""Tests for the application actions layered over the authorization chokepoint."""

import pytest

from recipebox.lib.permissions import Denied, assert_permission, has_permission
from recipebox.lib.permissions.actions import REQUIRED_LEVELS, Action
from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind

from tests.lib.permissions.conftest import PermissionTest

RECIPE_CASES = [
    PermissionTest("recipe", "owner", Action.READ, True),
    PermissionTest("recipe", "owner", Action.UPDATE, True),
    PermissionTest("recipe", "owner", Action.DELETE, True),
    PermissionTest("recipe", "owner", Action.SHARE, True),
    PermissionTest("recipe", "owner", Action.FILE_IN_BINDER, True),
    PermissionTest("recipe", "grantee", Action.READ, True, grant_level=PermissionLevel.view),
    PermissionTest("recipe", "grantee", Action.UPDATE, False, grant_level=PermissionLevel.view, expected_code=403),
    PermissionTest("recipe", "grantee", Action.UPDATE, True, grant_level=PermissionLevel.edit),
    PermissionTest("recipe", "grantee", Action.SHARE, False, grant_level=PermissionLevel.edit, expected_code=403),
    PermissionTest("recipe", "grantee", Action.SHARE, True, grant_level=PermissionLevel.admin),
    PermissionTest(
        "recipe", "grantee", Action.FILE_IN_BINDER, False, grant_level=PermissionLevel.edit, expected_code=403
    ),
    PermissionTest("recipe", "grantee", Action.FILE_IN_BINDER, True, grant_level=PermissionLevel.admin),
    PermissionTest(
        "recipe",
        "grantee",
        Action.DELETE,
        False,
        grant_level=PermissionLevel.admin,
        expected_code=403,
        description="Deletion is reserved for the owner, whatever the grant.",
    ),
    PermissionTest("recipe", "binder_grantee", Action.READ, True, binder_grant_level=PermissionLevel.view),
    PermissionTest("recipe", "binder_grantee", Action.UPDATE, True, binder_grant_level=PermissionLevel.edit),
    PermissionTest(
        "recipe", "binder_grantee", Action.SHARE, False, binder_grant_level=PermissionLevel.edit, expected_code=403
    ),
    PermissionTest("recipe", "other_user", Action.READ, False, expected_code=403),
    PermissionTest("recipe", "anonymous", Action.READ, False, expected_code=401),
    PermissionTest("recipe", "anonymous", Action.DELETE, False, expected_code=401),
    PermissionTest("recipe", "owner", Action.ADD_RECIPE, "NotImplementedError"),
    PermissionTest("recipe", "owner", Action.REMOVE_RECIPE, "NotImplementedError"),
]

BINDER_CASES = [
    PermissionTest("binder", "owner", Action.READ, True),
    PermissionTest("binder", "owner", Action.ADD_RECIPE, True),
    PermissionTest("binder", "owner", Action.DELETE, True),
    PermissionTest("binder", "grantee", Action.READ, True, grant_level=PermissionLevel.view),
    PermissionTest("binder", "grantee", Action.ADD_RECIPE, False, grant_level=PermissionLevel.view, expected_code=403),
    PermissionTest("binder", "grantee", Action.ADD_RECIPE, True, grant_level=PermissionLevel.edit),
    PermissionTest("binder", "grantee", Action.REMOVE_RECIPE, True, grant_level=PermissionLevel.edit),
    PermissionTest("binder", "grantee", Action.UPDATE, True, grant_level=PermissionLevel.edit),
    PermissionTest("binder", "grantee", Action.SHARE, True, grant_level=PermissionLevel.admin),
    PermissionTest("binder", "grantee", Action.DELETE, False, grant_level=PermissionLevel.admin, expected_code=403),
    PermissionTest("binder", "other_user", Action.READ, False, expected_code=403),
    PermissionTest("binder", "anonymous", Action.READ, False, expected_code=401),
    PermissionTest("binder", "owner", Action.FILE_IN_BINDER, "NotImplementedError"),
]


def _case_id(test_case: PermissionTest) -> str:
    outcome = "permitted" if test_case.should_be_permitted is True else "denied"
    if test_case.should_be_permitted == "NotImplementedError":
        outcome = "unsupported"
    return f"{test_case.kind}-{test_case.user_type}-{test_case.action.value}-{outcome}"


@pytest.mark.parametrize("test_case", RECIPE_CASES + BINDER_CASES, ids=_case_id)
def test_has_permission(entity_helper, test_case):
    resource = entity_helper.create_for_test(test_case)
    user_data = entity_helper.create_user_data(test_case.user_type)

    if test_case.should_be_permitted == "NotImplementedError":
        with pytest.raises(NotImplementedError):
            has_permission(user_data, resource, test_case.action)
        return

    result = has_permission(user_data, resource, test_case.action)
    assert result.permitted is test_case.should_be_permitted

    if not test_case.should_be_permitted:
        assert result.http_code == test_case.expected_code


@pytest.mark.parametrize(
    "test_case", [case for case in RECIPE_CASES + BINDER_CASES if case.should_be_permitted is False], ids=_case_id
)
def test_assert_permission_raises_when_denied(entity_helper, test_case):
    resource = entity_helper.create_for_test(test_case)
    user_data = entity_helper.create_user_data(test_case.user_type)

    with pytest.raises(Denied) as exc_info:
        assert_permission(user_data, resource, test_case.action)

    assert exc_info.value.http_code == test_case.expected_code


def test_every_action_is_mapped_for_some_kind():
    mapped = set(REQUIRED_LEVELS[ResourceKind.recipe]) | set(REQUIRED_LEVELS[ResourceKind.binder])
    assert mapped == set(Action)


def test_sharing_always_requires_admin():
    for kind in ResourceKind:
        assert REQUIRED_LEVELS[kind][Action.SHARE] == PermissionLevel.admin
