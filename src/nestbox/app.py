"""Fixture application — the ASGI callable the fixture server runs.

Converts scope dicts to ``Request`` objects, dispatches through the
route table, and sends the handler's result back through ASGI send().
"""

import logging
from typing import Any

from nestbox._internal.asgi import Receive, Scope, Send
from nestbox._internal.invoke import invoke
from nestbox.errors import HTTPError
from nestbox.http.request import Request
from nestbox.http.response import Response, not_found
from nestbox.routing.table import RouteTable
from nestbox.sender import send_response

logger = logging.getLogger("nestbox.server")


class FixtureApp:
    """ASGI application serving a frozen route table.

    Handlers may run concurrently for overlapping connections; the table
    itself is immutable, so the app holds no other shared state.
    """

    __slots__ = ("routes",)

    def __init__(self, routes: RouteTable) -> None:
        self.routes = routes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        response = await self.dispatch(request)
        await send_response(response, send, head=request.method == "HEAD")

    async def dispatch(self, request: Request) -> Response:
        """Run the matching handler and normalize its result."""
        route = self.routes.match(request.path)
        if route is None:
            return not_found()

        try:
            return _to_response(await invoke(route.handler, request))
        except HTTPError as exc:
            return Response(body=exc.detail, status=exc.status, headers=exc.headers)
        except Exception:
            logger.exception("500 %s %s", request.method, request.path)
            return Response(body="500 Internal Server Error", status=500)


def _to_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, (str, bytes)):
        return Response(body=result)
    if result is None:
        return Response()
    msg = f"Handler returned {type(result).__name__}; expected Response, str, or bytes."
    raise TypeError(msg)
