# ruff: noqa: E402

import pytest

fastapi = pytest.importorskip("fastapi")

from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.user import User

from tests.helpers.constants import EXTRA_USER, TEST_USER
from tests.helpers.dependency_overrider import DependencyOverrider
from tests.helpers.util.binder import add_recipe_to_binder, create_binder
from tests.helpers.util.recipe import create_recipe
from tests.helpers.util.share import link_in_db, share_via_api


def test_owner_holds_admin(client, setup_lib_db):
    recipe = create_recipe(client)

    response = client.get(f"/api/v1/permissions/recipes/{recipe['id']}")

    assert response.status_code == 200
    assert response.json() == {
        "resourceKind": "recipe",
        "resourceId": recipe["id"],
        "level": "admin",
    }


@pytest.mark.parametrize("level", ["view", "edit", "admin"])
def test_grantee_holds_granted_level(client, setup_lib_db, extra_user_app_overrides, level):
    recipe = create_recipe(client)
    share_via_api(client, "recipes", recipe["id"], EXTRA_USER["username"], level)

    with DependencyOverrider(extra_user_app_overrides):
        response = client.get(f"/api/v1/permissions/recipes/{recipe['id']}")

    assert response.status_code == 200
    assert response.json()["level"] == level


def test_binder_grant_reaches_filed_recipe(client, setup_lib_db, extra_user_app_overrides):
    recipe = create_recipe(client)
    binder = create_binder(client)
    add_recipe_to_binder(client, binder["id"], recipe["id"])
    share_via_api(client, "binders", binder["id"], EXTRA_USER["username"], "edit")

    with DependencyOverrider(extra_user_app_overrides):
        response = client.get(f"/api/v1/permissions/recipes/{recipe['id']}")

    assert response.json()["level"] == "edit"


def test_direct_and_binder_grants_combine_to_highest(client, setup_lib_db, extra_user_app_overrides):
    recipe = create_recipe(client)
    binder = create_binder(client)
    add_recipe_to_binder(client, binder["id"], recipe["id"])
    share_via_api(client, "recipes", recipe["id"], EXTRA_USER["username"], "view")
    share_via_api(client, "binders", binder["id"], EXTRA_USER["username"], "admin")

    with DependencyOverrider(extra_user_app_overrides):
        response = client.get(f"/api/v1/permissions/recipes/{recipe['id']}")

    assert response.json()["level"] == "admin"


def test_binder_grant_does_not_reach_unfiled_recipe(client, setup_lib_db, extra_user_app_overrides):
    recipe = create_recipe(client)
    binder = create_binder(client)
    share_via_api(client, "binders", binder["id"], EXTRA_USER["username"], "admin")

    with DependencyOverrider(extra_user_app_overrides):
        response = client.get(f"/api/v1/permissions/recipes/{recipe['id']}")

    assert response.status_code == 200
    assert response.json()["level"] is None


def test_anonymous_user_holds_nothing(client, setup_lib_db, anonymous_app_overrides):
    recipe = create_recipe(client)

    with DependencyOverrider(anonymous_app_overrides):
        response = client.get(f"/api/v1/permissions/recipes/{recipe['id']}")

    assert response.status_code == 200
    assert response.json()["level"] is None


def test_anonymous_user_holds_link_level(client, session, setup_lib_db, anonymous_app_overrides):
    recipe = create_recipe(client)
    owner = session.query(User).filter(User.username == TEST_USER["username"]).one()
    link_in_db(session, ResourceKind.recipe, recipe["id"], PermissionLevel.edit, owner, token="pesto-link")

    with DependencyOverrider(anonymous_app_overrides):
        by_header = client.get(f"/api/v1/permissions/recipes/{recipe['id']}", headers={"X-Share-Token": "pesto-link"})
        by_query = client.get(f"/api/v1/permissions/recipes/{recipe['id']}?share_token=pesto-link")

    assert by_header.json()["level"] == "edit"
    assert by_query.json()["level"] == "edit"


def test_unknown_link_token_grants_nothing(client, setup_lib_db, anonymous_app_overrides):
    recipe = create_recipe(client)

    with DependencyOverrider(anonymous_app_overrides):
        response = client.get(f"/api/v1/permissions/recipes/{recipe['id']}", headers={"X-Share-Token": "not-a-token"})

    assert response.status_code == 200
    assert response.json()["level"] is None


@pytest.mark.parametrize(
    "granted, asked, permitted",
    [
        ("view", "view", True),
        ("view", "edit", False),
        ("edit", "view", True),
        ("edit", "admin", False),
        ("admin", "admin", True),
    ],
)
def test_user_is_permitted(client, setup_lib_db, extra_user_app_overrides, granted, asked, permitted):
    binder = create_binder(client)
    share_via_api(client, "binders", binder["id"], EXTRA_USER["username"], granted)

    with DependencyOverrider(extra_user_app_overrides):
        response = client.get(f"/api/v1/permissions/user-is-permitted/binders/{binder['id']}/{asked}")

    assert response.status_code == 200
    assert response.json() is permitted


def test_user_without_access_is_not_permitted(client, setup_lib_db, extra_user_app_overrides):
    recipe = create_recipe(client)

    with DependencyOverrider(extra_user_app_overrides):
        response = client.get(f"/api/v1/permissions/user-is-permitted/recipes/{recipe['id']}/view")

    assert response.status_code == 200
    assert response.json() is False


def test_permission_on_missing_resource(client, setup_lib_db):
    response = client.get("/api/v1/permissions/binders/404")

    assert response.status_code == 404
    assert response.json()["detail"] == "binder 404 not found"


def test_unknown_level_is_rejected(client, setup_lib_db):
    recipe = create_recipe(client)

    response = client.get(f"/api/v1/permissions/user-is-permitted/recipes/{recipe['id']}/owner")

    assert response.status_code == 422
