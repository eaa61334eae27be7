from enum import Enum
from typing import Any, Mapping, Optional, Union

from fastapi import Depends
from sqlalchemy.orm import Session

from recipebox import deps
from recipebox.lib.authentication import get_share_token
from recipebox.lib.binders import find_binder
from recipebox.lib.permissions.loaders import Resource, link_snapshot_for_token
from recipebox.lib.permissions.snapshots import LinkSnapshot
from recipebox.lib.recipes import find_recipe
from recipebox.models.enums.resource_kind import ResourceKind

ROUTER_BASE_PREFIX = "/api/v1"

BASE_RESPONSES: Mapping[int, dict[str, Any]] = {
    400: {"description": "Bad request. Check parameters and payload."},
    401: {"description": "Authentication required."},
    403: {"description": "Forbidden. Insufficient permissions."},
    404: {"description": "Resource not found."},
    422: {"description": "Unprocessable entity. Validation failed."},
    500: {"description": "Internal server error."},
    503: {"description": "Service unavailable. The share store could not complete the request."},
}

BASE_400_RESPONSE: Mapping[Union[int, str], dict[str, Any]] = {400: BASE_RESPONSES[400]}
BASE_401_RESPONSE: Mapping[Union[int, str], dict[str, Any]] = {401: BASE_RESPONSES[401]}
BASE_403_RESPONSE: Mapping[Union[int, str], dict[str, Any]] = {403: BASE_RESPONSES[403]}
BASE_404_RESPONSE: Mapping[Union[int, str], dict[str, Any]] = {404: BASE_RESPONSES[404]}
BASE_422_RESPONSE: Mapping[Union[int, str], dict[str, Any]] = {422: BASE_RESPONSES[422]}
BASE_500_RESPONSE: Mapping[Union[int, str], dict[str, Any]] = {500: BASE_RESPONSES[500]}
BASE_503_RESPONSE: Mapping[Union[int, str], dict[str, Any]] = {503: BASE_RESPONSES[503]}

PUBLIC_ERROR_RESPONSES = {**BASE_404_RESPONSE, **BASE_500_RESPONSE}
ACCESS_CONTROL_ERROR_RESPONSES = {**BASE_401_RESPONSE, **BASE_403_RESPONSE}
VALIDATION_ERROR_RESPONSES = {**BASE_400_RESPONSE, **BASE_422_RESPONSE}
STORAGE_ERROR_RESPONSES = {**BASE_503_RESPONSE}


class ResourceCollection(str, Enum):
    """Path segment naming a kind of shareable resource."""

    recipes = "recipes"
    binders = "binders"

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.recipe if self is ResourceCollection.recipes else ResourceKind.binder


def fetch_resource(db: Session, collection: ResourceCollection, resource_id: int) -> Resource:
    if collection is ResourceCollection.recipes:
        return find_recipe(db, resource_id)
    return find_binder(db, resource_id)


async def get_share_link(
    token: Optional[str] = Depends(get_share_token),
    db: Session = Depends(deps.get_db),
) -> Optional[LinkSnapshot]:
    """The share link presented with this request, if its token is known."""
    return link_snapshot_for_token(db, token)
