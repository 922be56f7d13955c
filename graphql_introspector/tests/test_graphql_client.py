# Copyright 2024-present Kensho Technologies, LLC.
from dataclasses import dataclass
from typing import Any, Dict
import unittest
from unittest import mock

import requests

from ..client import GraphQLClient, QueryBuilder
from ..exceptions import DecodeError, GraphQLError, HttpError, NetworkError
from .test_helpers import get_sent_headers, get_sent_json, make_response, make_session


URL = "https://example.com/graphql"
QUERY = "query Viewer($login: String!) { user(login: $login) { name } }"


@dataclass
class ViewerResult:
    user: Dict[str, Any]


class GraphQLClientTests(unittest.TestCase):
    def test_run_query_returns_data(self) -> None:
        session = make_session(make_response(200, {"data": {"user": {"name": "octocat"}}}))
        client = GraphQLClient(URL, session=session)

        result = client.run_query(QueryBuilder(QUERY).set_variable("login", "octocat"))

        self.assertEqual({"user": {"name": "octocat"}}, result)
        session.post.assert_called_once()
        self.assertEqual(URL, session.post.call_args[0][0])
        self.assertEqual(
            {"query": QUERY, "variables": {"login": "octocat"}}, get_sent_json(session)
        )

    def test_run_query_sends_timeout(self) -> None:
        session = make_session(make_response(200, {"data": {}}))
        GraphQLClient(URL, timeout=2.5, session=session).run_query(QueryBuilder(QUERY))
        self.assertEqual(2.5, session.post.call_args[1]["timeout"])

    def test_run_query_converts_to_dataclass(self) -> None:
        session = make_session(make_response(200, {"data": {"user": {"name": "octocat"}}}))
        result = GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY), ViewerResult)
        self.assertEqual(ViewerResult(user={"name": "octocat"}), result)

    def test_run_query_converts_with_callable(self) -> None:
        session = make_session(make_response(200, {"data": {"user": {"name": "octocat"}}}))
        result = GraphQLClient(URL, session=session).run_query(
            QueryBuilder(QUERY), lambda data: data["user"]["name"].upper()
        )
        self.assertEqual("OCTOCAT", result)

    def test_run_query_conversion_failure_is_decode_error(self) -> None:
        session = make_session(make_response(200, {"data": {"unexpected": 1}}))
        with self.assertRaises(DecodeError):
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY), ViewerResult)

    def test_default_and_custom_headers(self) -> None:
        session = make_session(make_response(200, {"data": {}}))
        query_builder = QueryBuilder(QUERY).set_headers("Authorization", "Bearer token")

        GraphQLClient(URL, session=session).run_query(query_builder)

        headers = get_sent_headers(session)
        self.assertEqual("application/json; charset=utf-8", headers["Content-Type"])
        self.assertEqual("application/json; charset=utf-8", headers["Accept"])
        self.assertEqual("Bearer token", headers["Authorization"])

    def test_caller_headers_take_precedence(self) -> None:
        session = make_session(make_response(200, {"data": {}}))
        client = GraphQLClient(
            URL, session=session, headers={"User-Agent": "client", "X-Trace": "client"}
        )
        query_builder = (
            QueryBuilder(QUERY)
            .set_headers("content-type", "application/json")
            .set_headers("X-Trace", "query")
        )

        client.run_query(query_builder)

        headers = get_sent_headers(session)
        self.assertEqual("application/json", headers["Content-Type"])
        self.assertEqual("client", headers["User-Agent"])
        self.assertEqual("query", headers["X-Trace"])
        self.assertEqual(1, len([name for name in headers if name.lower() == "content-type"]))

    def test_errors_with_http_200_raise_graphql_error(self) -> None:
        session = make_session(make_response(200, {"errors": [{"message": "boom"}]}))

        with self.assertRaises(GraphQLError) as context:
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

        self.assertEqual(("boom",), context.exception.messages)
        self.assertEqual([{"message": "boom"}], context.exception.errors)

    def test_errors_alongside_data_raise_graphql_error(self) -> None:
        body = {"data": {"user": None}, "errors": [{"message": "not found"}, {"message": "nope"}]}
        session = make_session(make_response(200, body))

        with self.assertRaises(GraphQLError) as context:
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

        self.assertEqual(("not found", "nope"), context.exception.messages)
        self.assertEqual({"user": None}, context.exception.data)

    def test_empty_errors_array_is_not_an_error(self) -> None:
        session = make_session(make_response(200, {"data": {"user": None}, "errors": []}))
        result = GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))
        self.assertEqual({"user": None}, result)

    def test_non_2xx_status_raises_http_error(self) -> None:
        for status_code in (500, 404, 401, 302):
            session = make_session(make_response(status_code, {"data": {"user": None}}))

            with self.assertRaises(HttpError) as context:
                GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

            self.assertEqual(status_code, context.exception.status_code)

    def test_non_2xx_status_with_non_json_body(self) -> None:
        session = make_session(make_response(502, text="<html>Bad Gateway</html>"))

        with self.assertRaises(HttpError) as context:
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

        self.assertEqual(502, context.exception.status_code)
        self.assertEqual("<html>Bad Gateway</html>", context.exception.body)

    def test_invalid_json_raises_decode_error(self) -> None:
        session = make_session(make_response(200, text="this is not json"))
        with self.assertRaises(DecodeError):
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

    def test_non_object_json_raises_decode_error(self) -> None:
        session = make_session(make_response(200, [1, 2, 3]))
        with self.assertRaises(DecodeError):
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

    def test_missing_data_raises_decode_error(self) -> None:
        session = make_session(make_response(200, {"extensions": {}}))
        with self.assertRaises(DecodeError):
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

    def test_transport_failure_raises_network_error(self) -> None:
        session = mock.Mock(spec=requests.Session)
        session.post.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(NetworkError) as context:
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

        self.assertIsInstance(context.exception.__cause__, requests.ConnectionError)

    def test_timeout_raises_network_error(self) -> None:
        session = mock.Mock(spec=requests.Session)
        session.post.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(NetworkError):
            GraphQLClient(URL, session=session).run_query(QueryBuilder(QUERY))

    def test_calls_are_independent(self) -> None:
        session = make_session(
            make_response(200, {"data": {"n": 1}}), make_response(200, {"data": {"n": 2}})
        )
        client = GraphQLClient(URL, session=session)

        first = client.run_query(QueryBuilder(QUERY).set_variable("login", "alice"))
        second = client.run_query(
            QueryBuilder(QUERY).set_variable("other", 1).set_headers("X-Second", "yes")
        )

        self.assertEqual({"n": 1}, first)
        self.assertEqual({"n": 2}, second)
        self.assertEqual({"login": "alice"}, get_sent_json(session, 0)["variables"])
        self.assertEqual({"other": 1}, get_sent_json(session, 1)["variables"])
        self.assertNotIn("X-Second", get_sent_headers(session, 0))

    def test_reusing_builder_sends_current_variables(self) -> None:
        session = make_session(
            make_response(200, {"data": {}}), make_response(200, {"data": {}})
        )
        client = GraphQLClient(URL, session=session)
        query_builder = QueryBuilder(QUERY).set_variable("login", "alice")

        client.run_query(query_builder)
        query_builder.set_variable("login", "bob")
        client.run_query(query_builder)

        self.assertEqual({"login": "alice"}, get_sent_json(session, 0)["variables"])
        self.assertEqual({"login": "bob"}, get_sent_json(session, 1)["variables"])

    def test_client_creates_own_session(self) -> None:
        with mock.patch("requests.Session") as session_class:
            session_class.return_value.post.return_value = make_response(200, {"data": {"a": 1}})
            result = GraphQLClient(URL).run_query(QueryBuilder(QUERY))

        self.assertEqual({"a": 1}, result)
        session_class.assert_called_once_with()

    def test_close_releases_owned_session_only(self) -> None:
        with mock.patch("requests.Session") as session_class:
            with GraphQLClient(URL) as client:
                self.assertIs(session_class.return_value, client.session)
        session_class.return_value.close.assert_called_once_with()

        session = make_session()
        with GraphQLClient(URL, session=session):
            pass
        GraphQLClient(URL, session=session).close()
        session.close.assert_not_called()

    def test_variables_must_be_strict_json(self) -> None:
        for value in (float("nan"), float("inf"), object(), {1, 2}):
            session = make_session(make_response(200, {"data": {}}))
            query_builder = QueryBuilder(QUERY).set_variable("login", value)
            with self.assertRaises(ValueError):
                GraphQLClient(URL, session=session).run_query(query_builder)
            session.post.assert_not_called()

    def test_body_is_sent_as_utf8_json(self) -> None:
        session = make_session(make_response(200, {"data": {}}))
        GraphQLClient(URL, session=session).run_query(
            QueryBuilder(QUERY).set_variable("login", "zoë")
        )
        self.assertIsInstance(session.post.call_args[1]["data"], bytes)
        self.assertEqual({"login": "zoë"}, get_sent_json(session)["variables"])
