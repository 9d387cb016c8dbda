"""Shared fixtures for nestbox tests."""

from typing import Any

import pytest

from nestbox.http.request import Request
from nestbox.testing import fixture_server  # noqa: F401

LOREM = "Lorem ipsum dolor sit amet"


@pytest.fixture
def lorem_file(tmp_path):
    """A fixture file holding the lorem ipsum line."""
    path = tmp_path / "lorem"
    path.write_text(LOREM)
    return path


@pytest.fixture
def make_request():
    """Build a ``Request`` without a server, as the ASGI layer would."""

    def build(
        method: str = "GET",
        path: str = "/",
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        query_string: bytes = b"",
    ) -> Request:
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return {"type": "http.disconnect"}

        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string,
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
            "client": ("127.0.0.1", 0),
        }
        return Request.from_asgi(scope, receive)

    return build
