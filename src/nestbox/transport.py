"""Redirecting transports — send every request to the fixture server.

Code under test often hardcodes external URLs. Wrapping the client's
transport in one of these rewrites each outgoing request to the fixture
server's address, so ``https://api.example.com/v1/items`` arrives at the
fixture as ``/v1/items``. Only scheme, host, and port change; method,
path, query, headers (including ``Host``), body, and extensions go
through untouched.
"""

import httpx


def redirect(request: httpx.Request, target: str) -> httpx.Request:
    """Return a copy of *request* aimed at *target* (``host:port``) over plain HTTP.

    The original request is not modified.
    """
    host, _, port = target.rpartition(":")
    url = request.url.copy_with(scheme="http", host=host.strip("[]"), port=int(port))
    return httpx.Request(
        request.method,
        url,
        headers=request.headers,
        stream=request.stream,
        extensions=request.extensions,
    )


class RedirectingTransport(httpx.BaseTransport):
    """Sync transport decorator pinning every request to *target*.

    Holds nothing but the delegate and the target, so concurrent requests
    through one instance are safe. Delegate errors propagate unchanged.
    """

    def __init__(self, transport: httpx.BaseTransport, target: str) -> None:
        self.transport = transport
        self.target = target

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self.transport.handle_request(redirect(request, self.target))

    def close(self) -> None:
        self.transport.close()


class AsyncRedirectingTransport(httpx.AsyncBaseTransport):
    """Async twin of ``RedirectingTransport``."""

    def __init__(self, transport: httpx.AsyncBaseTransport, target: str) -> None:
        self.transport = transport
        self.target = target

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self.transport.handle_async_request(redirect(request, self.target))

    async def aclose(self) -> None:
        await self.transport.aclose()
