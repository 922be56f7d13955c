# Copyright 2024-present Kensho Technologies, LLC.
import dataclasses
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar, Union, overload

import requests
from requests.structures import CaseInsensitiveDict

from ..exceptions import DecodeError, GraphQLError, HttpError, NetworkError
from .query_builder import QueryBuilder


logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

DEFAULT_HEADERS = {
    "Content-Type": "application/json; charset=utf-8",
    "Accept": "application/json; charset=utf-8",
}


class GraphQLClient(object):
    """Execute GraphQL queries and mutations against a single HTTP endpoint.

    Each call to run_query() performs exactly one POST request. Nothing is retried or cached,
    and no state is carried over from one call to the next. Transport-level settings such as
    connection pooling, proxies or TLS configuration belong to the requests.Session, which may be
    supplied by the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Create a new client.

        Args:
            base_url: URL of the GraphQL endpoint
            timeout: optional number of seconds to wait for the server, passed to requests as-is.
                     None means wait indefinitely.
            session: optional requests.Session to send requests with. If not provided, the client
                     creates and owns its own session. An owned session is closed by close(),
                     or on leaving a with-block.
            headers: optional headers sent with every request. Headers set on the QueryBuilder
                     take precedence over these.
        """
        self.base_url = base_url
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.headers: Dict[str, str] = dict(headers or {})

    def close(self) -> None:
        """Release the connections of the session, if the client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "GraphQLClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get_request_headers(self, query_builder: QueryBuilder) -> CaseInsensitiveDict:
        """Merge default, client and per-query headers, with later sources taking precedence."""
        request_headers = CaseInsensitiveDict(DEFAULT_HEADERS)
        request_headers.update(self.headers)
        request_headers.update(query_builder.headers)
        return request_headers

    def _post(self, query_builder: QueryBuilder) -> requests.Response:
        """Send the query and return the raw response, raising on transport or HTTP errors."""
        body = query_builder.build_request_body()
        try:
            payload = json.dumps(body, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise ValueError("GraphQL variables must be JSON-serializable: {}".format(e)) from e

        logger.debug(
            "Sending GraphQL request to %(url)s with variables %(variables)s",
            {"url": self.base_url, "variables": list(body["variables"])},
        )
        try:
            response = self.session.post(
                self.base_url,
                data=payload,
                headers=self._get_request_headers(query_builder),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(
                "Failed to reach GraphQL endpoint {}: {}".format(self.base_url, e)
            ) from e

        if not 200 <= response.status_code < 300:
            raise HttpError(response.status_code, response.text)

        return response

    def execute(self, query_builder: QueryBuilder) -> Any:
        """Run the query and return the raw "data" member of the response.

        Raises:
            NetworkError if the endpoint could not be reached
            HttpError if the endpoint answered with a non-2xx status code
            DecodeError if the body was not a JSON object containing "data"
            GraphQLError if the body contained a non-empty "errors" array
            ValueError if the variables could not be serialized as strict JSON
        """
        response = self._post(query_builder)

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(
                "GraphQL endpoint {} returned a body that is not valid JSON: {}".format(
                    self.base_url, e
                )
            ) from e

        if not isinstance(payload, dict):
            raise DecodeError(
                "Expected the GraphQL response to be a JSON object, but got: {}".format(payload)
            )

        errors = payload.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            raise GraphQLError(errors, payload.get("data"))

        if "data" not in payload:
            raise DecodeError(
                'GraphQL response has no "data" member. Keys present: {}'.format(list(payload))
            )

        return payload["data"]

    @overload
    def run_query(self, query_builder: QueryBuilder) -> Any:
        ...

    @overload
    def run_query(
        self,
        query_builder: QueryBuilder,
        result_type: Union[Type[ResultT], Callable[[Any], ResultT]],
    ) -> ResultT:
        ...

    def run_query(self, query_builder, result_type=None):
        """Run the query and deserialize the "data" member of the response.

        Args:
            query_builder: the query, variables and headers to send
            result_type: optional type or callable to convert the "data" member into.
                         Dataclasses are constructed with the members of "data" as keyword
                         arguments, any other type or callable is called with "data" itself.
                         If not provided, the decoded JSON value is returned as-is.

        Returns:
            the "data" member of the response, converted to result_type if one was given

        Raises:
            NetworkError, HttpError, DecodeError, GraphQLError: see execute()
        """
        data = self.execute(query_builder)
        if result_type is None:
            return data
        return _convert_result(data, result_type)


def _convert_result(
    data: Any, result_type: Union[Type[ResultT], Callable[[Any], ResultT]]
) -> ResultT:
    """Convert the decoded "data" member into the caller-requested type."""
    try:
        if dataclasses.is_dataclass(result_type) and isinstance(result_type, type):
            if not isinstance(data, dict):
                raise TypeError("expected a JSON object, got {}".format(type(data).__name__))
            return result_type(**data)
        return result_type(data)  # type: ignore[call-arg]
    except (TypeError, ValueError) as e:
        raise DecodeError(
            'Could not convert GraphQL "data" into {}: {}'.format(
                getattr(result_type, "__name__", result_type), e
            )
        ) from e
