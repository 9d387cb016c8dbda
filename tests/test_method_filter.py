"""Tests for nestbox.routing.filter — method allow-lists."""

from nestbox.http.response import Response
from nestbox.routing.filter import allowed


def _handler(request) -> Response:
    return Response(body="Lorem ipsum dolor sit amet")


class TestAllowed:
    def test_no_methods_returns_handler_unchanged(self) -> None:
        assert allowed(_handler) is _handler

    async def test_allowed_method_reaches_handler(self, make_request) -> None:
        filtered = allowed(_handler, "GET")
        response = await filtered(make_request("GET", "/data"))
        assert response.status == 200
        assert response.text == "Lorem ipsum dolor sit amet"

    async def test_disallowed_method_is_not_found(self, make_request) -> None:
        filtered = allowed(_handler, "GET")
        response = await filtered(make_request("POST", "/data"))
        assert response.status == 404
        assert response.body_bytes == b""

    async def test_match_is_exact(self, make_request) -> None:
        filtered = allowed(_handler, "get")
        response = await filtered(make_request("GET", "/data"))
        assert response.status == 404

    async def test_several_methods(self, make_request) -> None:
        filtered = allowed(_handler, "PUT", "PATCH")
        assert (await filtered(make_request("PATCH", "/"))).status == 200
        assert (await filtered(make_request("PUT", "/"))).status == 200
        assert (await filtered(make_request("GET", "/"))).status == 404

    async def test_async_handler(self, make_request) -> None:
        async def handler(request) -> str:
            return await request.text()

        filtered = allowed(handler, "POST")
        result = await filtered(make_request("POST", "/", body=b"payload"))
        assert result == "payload"
