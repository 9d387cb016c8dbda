"""Server options — each registers one route on the route table.

An option is a plain function from one ``RouteTable`` to the next. The
server folds them in order over an empty table, so the only ordering
that matters is between two registrations of the same path, where the
later one wins.

Usage::

    server = Server(
        with_fixture("/data", "tests/fixtures/data.json"),
        with_handler("/submit", submit, "POST"),
    )
"""

from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

from nestbox._internal.types import Handler
from nestbox.routing.filter import allowed
from nestbox.routing.route import Route
from nestbox.routing.table import RouteTable
from nestbox.static import serve_file

ServerOption: TypeAlias = Callable[[RouteTable], RouteTable]


def with_fixture(url_path: str, file_path: str | Path) -> ServerOption:
    """Serve the file at *file_path* for requests to *url_path*.

    The file is read when a request arrives, not when the option is applied.
    """

    def option(table: RouteTable) -> RouteTable:
        return table.with_route(Route(path=url_path, handler=serve_file(file_path)))

    return option


def with_handler(url_path: str, handler: Handler, *methods: str) -> ServerOption:
    """Route *url_path* to a custom handler.

    The handler is only called when the request method is one of *methods*;
    any other method gets a 404 with an empty body. With no methods every
    request reaches the handler. Handlers take a ``Request`` and return a
    ``Response``, ``str``, or ``bytes``; they may be ``async``.
    """

    def option(table: RouteTable) -> RouteTable:
        return table.with_route(
            Route(path=url_path, handler=allowed(handler, *methods))
        )

    return option


# Python has one callable type, so the handler/handler-function pair collapses.
with_handler_func = with_handler


def build_routes(options: tuple[ServerOption, ...]) -> RouteTable:
    """Fold *options* over an empty table, in order."""
    table = RouteTable()
    for option in options:
        table = option(table)
    return table
