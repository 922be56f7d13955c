# Copyright 2024-present Kensho Technologies, LLC.
from typing import Any, Dict, List, Optional, Tuple


class GraphQLIntrospectorError(Exception):
    """Base class for all errors raised by this package."""


class NetworkError(GraphQLIntrospectorError):
    """Raised when the HTTP request could not be completed at the transport level.

    Connection refused, DNS resolution failures, TLS errors and transport timeouts all land here.
    The underlying requests exception is chained as __cause__. Nothing is retried.
    """


class HttpError(GraphQLIntrospectorError):
    """Raised when the endpoint answered with a non-2xx HTTP status code.

    The response body is kept for debugging, but is otherwise ignored: a non-2xx status is an
    error regardless of whether the body happens to contain GraphQL data.
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        """Create a new HttpError for the given status code and raw response body."""
        super(HttpError, self).__init__(
            "GraphQL endpoint returned HTTP status {}: {}".format(status_code, body[:200])
        )
        self.status_code = status_code
        self.body = body


class DecodeError(GraphQLIntrospectorError):
    """Raised when the response body could not be decoded into the expected shape.

    For example:
    - the body is not valid JSON;
    - the body is valid JSON, but not a JSON object;
    - the body has neither a "data" nor an "errors" member;
    - the "data" member could not be converted into the requested result type.
    """


class GraphQLError(GraphQLIntrospectorError):
    """Raised when the server reported a non-empty "errors" array, even alongside HTTP 200."""

    def __init__(self, errors: List[Dict[str, Any]], data: Optional[Any] = None) -> None:
        """Create a new GraphQLError from the server-reported errors array."""
        self.errors = errors
        self.data = data
        self.messages: Tuple[str, ...] = tuple(_get_error_message(error) for error in errors)
        super(GraphQLError, self).__init__("GraphQL errors: {}".format("; ".join(self.messages)))


class SchemaBuildError(GraphQLIntrospectorError):
    """Raised when the introspection result does not have the expected shape.

    This could be due to many reasons, such as:
    - a type is missing its "kind" or "name";
    - a type has a kind outside of the six named kinds of the GraphQL type system;
    - a type reference wrapper chain is too deep, or does not end in a named type;
    - a type reference names a type that is not part of the introspected types list.
    """

    def __init__(self, reason: str) -> None:
        """Create a new SchemaBuildError with a human-readable reason."""
        super(SchemaBuildError, self).__init__(reason)
        self.reason = reason


class SchemaWriteError(GraphQLIntrospectorError):
    """Raised when the rendered schema could not be written to the filesystem."""

    def __init__(self, path: str, reason: str) -> None:
        """Create a new SchemaWriteError for the given destination path."""
        super(SchemaWriteError, self).__init__(
            'Could not write schema to "{}": {}'.format(path, reason)
        )
        self.path = path


def _get_error_message(error: Any) -> str:
    """Return the "message" of a single GraphQL error, tolerating non-conforming servers."""
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return str(error)
