"""nestbox — ephemeral HTTP fixture servers for tests.

Bind static files or handlers to URL paths, start a server on an
OS-assigned loopback port, and get an ``httpx`` client that reaches it
whatever hostname the code under test puts in its URLs.

Basic usage::

    from nestbox import Server, with_fixture, with_handler

    server = Server(
        with_fixture("/data", "tests/fixtures/data.txt"),
        with_handler("/echo", echo, "POST"),
    )

    with server.running() as handle:
        response = handle.client.get("https://api.example.com/data")

Under pytest, the ``fixture_server`` fixture starts and tears down
servers for you (see ``nestbox.testing``).
"""

__version__ = "0.1.0"
__all__ = [
    "Address",
    "HTTPError",
    "NestboxError",
    "NotFound",
    "Request",
    "Response",
    "Server",
    "ServerConfig",
    "ServerCrashed",
    "ServerHandle",
    "ServerOption",
    "ServerStartupError",
    "ServerState",
    "with_fixture",
    "with_handler",
    "with_handler_func",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import nestbox`` light; uvicorn and httpx load on first use.
    """
    if name in ("Address", "Server", "ServerHandle", "ServerState"):
        from nestbox import server as _server

        return getattr(_server, name)

    if name in ("ServerOption", "with_fixture", "with_handler", "with_handler_func"):
        from nestbox import options as _options

        return getattr(_options, name)

    if name == "ServerConfig":
        from nestbox.config import ServerConfig

        return ServerConfig

    if name in ("Request", "Response"):
        from nestbox import http as _http

        return getattr(_http, name)

    if name in ("HTTPError", "NestboxError", "NotFound", "ServerCrashed", "ServerStartupError"):
        from nestbox import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
