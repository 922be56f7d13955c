# Copyright 2024-present Kensho Technologies, LLC.
from typing import Any, Mapping, Optional

from .exceptions import SchemaBuildError


def get_required_field(
    introspection_data: Mapping[str, Any], field_name: str, context: Optional[str] = None
) -> Any:
    """Return the value of a field that the introspection result is required to provide.

    Args:
        introspection_data: one JSON object out of the introspection result
        field_name: name of the member that must be present and non-null
        context: optional human-readable description of where the object was found, used to
                 make the error message actionable

    Returns:
        the value of the member

    Raises:
        SchemaBuildError if the data is not a JSON object, or if the member is absent or null
    """
    location = " in {}".format(context) if context else ""
    if not isinstance(introspection_data, Mapping):
        raise SchemaBuildError(
            "Expected a JSON object{} but got: {}".format(location, introspection_data)
        )
    value = introspection_data.get(field_name)
    if value is None:
        raise SchemaBuildError(
            'Introspection result is missing required field "{}"{}: {}'.format(
                field_name, location, dict(introspection_data)
            )
        )
    return value


def get_optional_list(introspection_data: Mapping[str, Any], field_name: str) -> list:
    """Return the list stored under the given member, treating absent and null as empty."""
    value = introspection_data.get(field_name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaBuildError(
            'Expected field "{}" to be a list, but got: {}'.format(field_name, value)
        )
    return value
