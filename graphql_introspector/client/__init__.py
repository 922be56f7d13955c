# Copyright 2024-present Kensho Technologies, LLC.
from .graphql_client import DEFAULT_HEADERS, GraphQLClient  # noqa
from .query_builder import QueryBuilder  # noqa
