# Copyright 2024-present Kensho Technologies, LLC.
import logging
from typing import Any, Dict, Mapping, Optional

from graphql import get_introspection_query
import requests

from ..client import GraphQLClient, QueryBuilder
from ..exceptions import DecodeError, SchemaBuildError, SchemaWriteError
from .schema_builder import build_schema_from_introspection
from .schema_model import IntrospectedSchema
from .sdl_printer import print_schema_sdl


logger = logging.getLogger(__name__)

# The standard introspection query, the same one GraphiQL and most GraphQL tooling sends.
INTROSPECTION_QUERY = get_introspection_query(descriptions=True)


class GraphQLIntrospector(object):
    """Introspect a remote GraphQL schema and write it out as an SDL file.

    Typical use chains the three steps:

        introspector = GraphQLIntrospector()
        introspector.add("Authorization", "Bearer <TOKEN>").add("User-Agent", "my-app")
        introspector.get_schema("https://api.github.com/graphql")
        introspector.build()
        introspector.write("./schema.graphql")

    The introspector keeps the raw introspection result and the built schema between steps, so
    each step operates on the output of the previous one. Both build() and write() also accept
    their input explicitly.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a new introspector.

        Args:
            url: optional URL of the GraphQL endpoint. May instead be passed to get_schema().
            timeout: optional number of seconds to wait for the server, passed to requests as-is
            session: optional requests.Session used to send the introspection query
        """
        self.url = url
        self.timeout = timeout
        self.session = session
        self.headers: Dict[str, str] = {}
        self.introspection_result: Optional[Dict[str, Any]] = None
        self.schema: Optional[IntrospectedSchema] = None

    def add(self, header_name: str, header_value: str) -> "GraphQLIntrospector":
        """Set a header to send with the introspection query. Returns self, for chaining."""
        self.headers[header_name] = header_value
        return self

    def get_schema(self, url: Optional[str] = None) -> Dict[str, Any]:
        """Send the introspection query and return the "data" member of the response.

        The result is also kept on the introspector, to be used by build().

        Args:
            url: URL of the GraphQL endpoint. Defaults to the URL given to the constructor.

        Returns:
            dict, the introspection result, with a single "__schema" key

        Raises:
            ValueError if no URL was provided at all
            NetworkError, HttpError, DecodeError, GraphQLError: see GraphQLClient.execute()
            DecodeError if the "data" member is not a JSON object
        """
        url = url if url is not None else self.url
        if url is None:
            raise ValueError("No GraphQL endpoint URL was provided to introspect.")

        query_builder = QueryBuilder(INTROSPECTION_QUERY).set_operation_name("IntrospectionQuery")
        for header_name, header_value in self.headers.items():
            query_builder.set_headers(header_name, header_value)

        logger.info("Introspecting GraphQL schema at %(url)s", {"url": url})
        with GraphQLClient(url, timeout=self.timeout, session=self.session) as client:
            introspection_result = client.run_query(query_builder)
        if not isinstance(introspection_result, Mapping):
            raise DecodeError(
                'Expected the introspection "data" member to be a JSON object, but got: {}'.format(
                    introspection_result
                )
            )

        self.introspection_result = dict(introspection_result)
        self.schema = None
        return self.introspection_result

    def build(self, introspection_result: Optional[Dict[str, Any]] = None) -> IntrospectedSchema:
        """Build the schema model from an introspection result.

        Args:
            introspection_result: optional introspection result to build from. Defaults to the
                                  result of the last get_schema() call.

        Returns:
            IntrospectedSchema, which is also kept on the introspector to be used by write()

        Raises:
            SchemaBuildError if there is no introspection result, or if it is malformed
        """
        if introspection_result is None:
            introspection_result = self.introspection_result
        if introspection_result is None:
            raise SchemaBuildError(
                "No introspection result is available. Call get_schema() before build()."
            )

        self.schema = build_schema_from_introspection(introspection_result)
        return self.schema

    def write(self, path: str, schema: Optional[IntrospectedSchema] = None) -> None:
        """Write the schema as SDL text to the given path, overwriting any existing file.

        Args:
            path: destination file path. The file is written as UTF-8.
            schema: optional schema to write. Defaults to the result of the last build() call.

        Raises:
            SchemaBuildError if there is no schema to write
            SchemaWriteError if the file could not be written
        """
        if schema is None:
            schema = self.schema
        if schema is None:
            raise SchemaBuildError("No schema is available to write. Call build() before write().")

        sdl = print_schema_sdl(schema)
        try:
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(sdl)
        except OSError as e:
            raise SchemaWriteError(path, str(e)) from e

        logger.info(
            "Wrote %(num_types)d type declarations to %(path)s",
            {"num_types": len(schema), "path": path},
        )
