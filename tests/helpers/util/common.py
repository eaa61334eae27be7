from typing import Any


def update_expected_response_for_created_resources(expected: dict[str, Any], actual: dict[str, Any]) -> dict[str, Any]:
    """Copy the server-assigned fields of a created resource into an expected response."""
    expected.update({key: actual[key] for key in ("id", "creationTime", "modificationTime") if key in actual})
    return expected
