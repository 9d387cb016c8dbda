"""pytest plugin for fixture servers.

Registered through the ``pytest11`` entry point, so installing nestbox
makes the ``fixture_server`` fixture available everywhere::

    def test_download(fixture_server, tmp_path):
        (tmp_path / "data.json").write_text('{"ok": true}')
        handle = fixture_server(with_fixture("/data.json", tmp_path / "data.json"))

        response = handle.client.get("https://cdn.example.com/data.json")
        assert response.json() == {"ok": True}

Servers started through the fixture are torn down when the test
finishes, all of them, even when one teardown fails. A server whose
serve loop died fails the test at teardown with ``ServerCrashed``.
"""

from collections.abc import Callable, Iterator
from contextlib import ExitStack

import pytest

from nestbox.config import ServerConfig
from nestbox.options import ServerOption
from nestbox.server import Server, ServerHandle


@pytest.fixture
def fixture_server() -> Iterator[Callable[..., ServerHandle]]:
    """Factory fixture: ``fixture_server(*options, config=None) -> ServerHandle``."""
    with ExitStack() as teardowns:

        def start(*options: ServerOption, config: ServerConfig | None = None) -> ServerHandle:
            handle, stop = Server(*options, config=config).listen()
            teardowns.callback(stop)
            return handle

        yield start
