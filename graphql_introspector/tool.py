#!/usr/bin/env python
# Copyright 2024-present Kensho Technologies, LLC.
"""Utility modeled after json.tool, introspects a GraphQL endpoint and writes its schema as SDL.

Used as: python -m graphql_introspector.tool URL OUTPUT [-H "Name: value"]...
"""
import argparse
import logging
import sys
from typing import List, Optional, Tuple

from . import GraphQLIntrospector
from .exceptions import GraphQLIntrospectorError


logger = logging.getLogger(__name__)


def _parse_header(raw_header: str) -> Tuple[str, str]:
    """Split a "Name: value" command-line header into its name and value."""
    name, separator, value = raw_header.partition(":")
    if not separator or not name.strip():
        raise argparse.ArgumentTypeError(
            'Expected a header of the form "Name: value", got: {}'.format(raw_header)
        )
    return name.strip(), value.strip()


def _get_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m graphql_introspector.tool",
        description="Introspect a GraphQL endpoint and write its schema as SDL.",
    )
    parser.add_argument("url", help="URL of the GraphQL endpoint")
    parser.add_argument("output", help="path of the SDL file to write")
    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        default=[],
        type=_parse_header,
        help='header to send, as "Name: value". May be repeated.',
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="seconds to wait for the server"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Introspect the endpoint named on the command line and write its schema to a file."""
    args = _get_argument_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    introspector = GraphQLIntrospector(timeout=args.timeout)
    for header_name, header_value in args.headers:
        introspector.add(header_name, header_value)

    try:
        introspector.get_schema(args.url)
        introspector.build()
        introspector.write(args.output)
    except GraphQLIntrospectorError as e:
        logger.debug("Introspection failed.", exc_info=True)
        sys.stderr.write("error: {}\n".format(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
