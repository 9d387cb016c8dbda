"""Fixture server lifecycle.

``Server`` folds its options into an immutable route table. ``listen()``
binds a loopback socket on an OS-assigned port, starts uvicorn over that
socket on a background thread, and returns a handle plus the teardown.

Each ``listen()`` moves through ``UNSTARTED -> LISTENING -> STOPPED``.
STOPPED is terminal; listening again gives a new, independent handle.
A serve-loop crash also lands in STOPPED, and ``failure`` says why.

The bind happens before the serve thread starts, so a request sent right
after ``listen()`` returns waits in the OS backlog instead of failing.
"""

from __future__ import annotations

import enum
import functools
import logging
import socket
import threading
from collections.abc import Callable, Iterator
from concurrent.futures import Future
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, NamedTuple

import anyio
import httpx
import uvicorn

from nestbox.app import FixtureApp
from nestbox.config import ServerConfig
from nestbox.errors import ServerCrashed, ServerStartupError
from nestbox.options import ServerOption, build_routes
from nestbox.routing.table import RouteTable
from nestbox.transport import AsyncRedirectingTransport, RedirectingTransport

logger = logging.getLogger("nestbox.server")


class ServerState(enum.Enum):
    UNSTARTED = "unstarted"
    LISTENING = "listening"
    STOPPED = "stopped"


class Address(NamedTuple):
    """Bound IP and port of a fixture server."""

    host: str
    port: int

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"


@dataclass(frozen=True, slots=True)
class ServerHandle:
    """A running fixture server.

    ``client`` sends every request to this server whatever host its URL
    names. ``failure`` resolves to ``None`` when the serve loop exits
    through teardown, or to the exception that killed it.
    """

    address: Address
    client: httpx.Client
    failure: Future[None]
    _listener: _Listener = field(repr=False, compare=False)

    @property
    def url(self) -> str:
        """Base URL of the server, e.g. ``http://127.0.0.1:53412``."""
        return f"http://{self.address}"

    @property
    def state(self) -> ServerState:
        return self._listener.state

    def async_client(self, **kwargs: Any) -> httpx.AsyncClient:
        """Return a new ``httpx.AsyncClient`` redirected to this server.

        The caller owns it; close it with ``async with`` or ``aclose()``.
        """
        transport = AsyncRedirectingTransport(httpx.AsyncHTTPTransport(), str(self.address))
        return httpx.AsyncClient(transport=transport, **kwargs)


class _Listener:
    """Socket, uvicorn server, and serve thread behind one ``listen()``."""

    def __init__(self, app: FixtureApp, config: ServerConfig) -> None:
        self.app = app
        self.config = config
        self.state = ServerState.UNSTARTED
        self.failure: Future[None] = Future()
        self._lock = threading.Lock()
        self._stopping = threading.Event()
        self._torn_down = False
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    def start(self) -> Address:
        self._socket = _bind(self.config)
        host, port = self._socket.getsockname()[:2]

        self._server = uvicorn.Server(
            uvicorn.Config(
                self.app,
                lifespan="off",
                access_log=False,
                log_config=None,
                log_level=self.config.log_level,
                proxy_headers=False,
                backlog=self.config.backlog,
                timeout_graceful_shutdown=max(1, round(self.config.shutdown_timeout)),
            )
        )
        self._thread = threading.Thread(
            target=self._serve, name=f"nestbox-{port}", daemon=True
        )
        self.state = ServerState.LISTENING
        self._thread.start()
        logger.debug("Fixture server listening on %s:%d", host, port)
        return Address(host, port)

    def _serve(self) -> None:
        assert self._server is not None
        assert self._socket is not None
        try:
            anyio.run(functools.partial(self._server.serve, sockets=[self._socket]))
        except (Exception, SystemExit) as exc:  # uvicorn exits on startup failure
            self._fault(exc)
            return
        if not self._stopping.is_set():
            self._fault(RuntimeError("serve loop exited before teardown"))
            return
        self.failure.set_result(None)

    def _fault(self, exc: BaseException) -> None:
        with self._lock:
            self.state = ServerState.STOPPED
        logger.critical("Fixture server serve loop died", exc_info=exc)
        self.failure.set_exception(exc)
        if self.config.on_fault is not None:
            self.config.on_fault(exc)

    def stop(self) -> None:
        with self._lock:
            if self._torn_down or self.state is ServerState.UNSTARTED:
                return
            self._torn_down = True
            self.state = ServerState.STOPPED

        assert self._server is not None
        assert self._thread is not None
        assert self._socket is not None

        self._stopping.set()
        self._server.should_exit = True
        self._thread.join(self.config.shutdown_timeout)
        if self._thread.is_alive():
            logger.warning("Fixture server did not stop in %.1fs; forcing exit", self.config.shutdown_timeout)
            self._server.force_exit = True
            self._thread.join(self.config.shutdown_timeout)
        self._socket.close()
        logger.debug("Fixture server on %s stopped", self._thread.name)

        if self.failure.done() and self.failure.exception() is not None:
            msg = "Fixture server serve loop died before teardown"
            raise ServerCrashed(msg) from self.failure.exception()


def _bind(config: ServerConfig) -> socket.socket:
    """Bind and listen; any failure is a ``ServerStartupError``."""
    family = socket.AF_INET6 if ":" in config.host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((config.host, config.port))
        sock.listen(config.backlog)
    except OSError as exc:
        sock.close()
        msg = f"Cannot bind fixture server to {config.host}:{config.port}: {exc}"
        raise ServerStartupError(msg) from exc
    return sock


class Server:
    """An HTTP fixture server definition.

    Usage::

        server = Server(with_fixture("/data", "tests/data.json"))
        handle, stop = server.listen()
        try:
            response = handle.client.get("https://api.example.com/data")
        finally:
            stop()
    """

    __slots__ = ("config", "routes")

    def __init__(self, *options: ServerOption, config: ServerConfig | None = None) -> None:
        self.config = config or ServerConfig()
        self.routes: RouteTable = build_routes(options)

    def listen(self) -> tuple[ServerHandle, Callable[[], None]]:
        """Start serving and return the handle and its teardown.

        The teardown stops accepting connections and releases the listener.
        Calling it again is a no-op. If the serve loop died unexpectedly it
        raises ``ServerCrashed``.

        Raises:
            ServerStartupError: If the listener cannot be bound.
        """
        listener = _Listener(FixtureApp(self.routes), self.config)
        address = listener.start()
        client = httpx.Client(transport=RedirectingTransport(httpx.HTTPTransport(), str(address)))
        handle = ServerHandle(
            address=address,
            client=client,
            failure=listener.failure,
            _listener=listener,
        )
        return handle, listener.stop

    @contextmanager
    def running(self) -> Iterator[ServerHandle]:
        """Serve for the duration of a ``with`` block."""
        handle, stop = self.listen()
        try:
            yield handle
        finally:
            stop()
