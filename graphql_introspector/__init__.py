# Copyright 2024-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from .client import GraphQLClient, QueryBuilder  # noqa
from .exceptions import (  # noqa
    DecodeError,
    GraphQLError,
    GraphQLIntrospectorError,
    HttpError,
    NetworkError,
    SchemaBuildError,
    SchemaWriteError,
)
from .introspection import (  # noqa
    INTROSPECTION_QUERY,
    GraphQLIntrospector,
    IntrospectedSchema,
    build_schema_from_introspection,
    print_schema_sdl,
)


__package_name__ = "graphql-introspector"
__version__ = "0.2.0"
