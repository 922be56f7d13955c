# Copyright 2024-present Kensho Technologies, LLC.
from collections import OrderedDict
import copy
from typing import Any, Dict, Optional


class QueryBuilder(object):
    """Accumulate the query text, variables and headers of a single GraphQL request.

    The query document is stored verbatim: it is neither parsed nor validated here, and the
    caller is responsible for its correctness. Variables and headers are kept in insertion order,
    and setting an existing name overwrites its previous value.

    All setters return the builder itself, so calls may be chained:

        builder = (
            QueryBuilder("query Repo($name: String!) { repository(name: $name) { id } }")
            .set_variable("name", "graphql-introspector")
            .set_headers("Authorization", "Bearer <TOKEN>")
        )
    """

    def __init__(self, query: str) -> None:
        """Create a new builder for the given GraphQL query or mutation document."""
        self.query = query
        self.operation_name: Optional[str] = None
        self.variables: Dict[str, Any] = OrderedDict()
        self.headers: Dict[str, str] = OrderedDict()

    def set_variable(self, name: str, value: Any) -> "QueryBuilder":
        """Set the value of a query variable. The value must be JSON-serializable."""
        self.variables[name] = value
        return self

    def set_headers(self, name: str, value: str) -> "QueryBuilder":
        """Set an HTTP header to be sent along with the request."""
        self.headers[name] = value
        return self

    set_header = set_headers

    def set_operation_name(self, operation_name: str) -> "QueryBuilder":
        """Select which operation to run, for documents that define more than one."""
        self.operation_name = operation_name
        return self

    def build_request_body(self) -> Dict[str, Any]:
        """Return a new JSON-serializable request body for the accumulated query and variables."""
        body: Dict[str, Any] = {
            "query": self.query,
            "variables": copy.deepcopy(dict(self.variables)),
        }
        if self.operation_name is not None:
            body["operationName"] = self.operation_name
        return body

    def __repr__(self) -> str:
        return "QueryBuilder(query={!r}, variables={!r}, headers={!r})".format(
            self.query, dict(self.variables), list(self.headers)
        )
