"""Tests for nestbox.transport — request redirection."""

import httpx
import pytest

from nestbox.transport import AsyncRedirectingTransport, RedirectingTransport, redirect

TARGET = "127.0.0.1:8123"


class TestRedirect:
    def test_rewrites_scheme_host_and_port(self) -> None:
        request = httpx.Request("GET", "https://just.made.this.up.com:8443/data?x=1")
        rewritten = redirect(request, TARGET)
        assert rewritten.url.scheme == "http"
        assert rewritten.url.host == "127.0.0.1"
        assert rewritten.url.port == 8123
        assert rewritten.url.path == "/data"
        assert rewritten.url.query == b"x=1"

    def test_keeps_method_headers_and_body(self) -> None:
        request = httpx.Request(
            "POST",
            "https://api.example.com/items",
            headers={"X-Token": "abc"},
            content=b"payload",
        )
        rewritten = redirect(request, TARGET)
        assert rewritten.method == "POST"
        assert rewritten.headers["x-token"] == "abc"
        assert rewritten.headers["host"] == "api.example.com"
        assert rewritten.read() == b"payload"

    def test_original_request_untouched(self) -> None:
        request = httpx.Request("GET", "https://api.example.com/items")
        redirect(request, TARGET)
        assert str(request.url) == "https://api.example.com/items"

    def test_ipv6_target(self) -> None:
        request = httpx.Request("GET", "http://example.com/")
        rewritten = redirect(request, "[::1]:9000")
        assert rewritten.url.host == "::1"
        assert rewritten.url.port == 9000


class TestRedirectingTransport:
    def test_delegate_sees_rewritten_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="Lorem ipsum dolor sit amet")

        transport = RedirectingTransport(httpx.MockTransport(handler), TARGET)
        with httpx.Client(transport=transport) as client:
            response = client.get("https://just.made.this.up.com/data")

        assert response.text == "Lorem ipsum dolor sit amet"
        assert str(seen[0].url) == "http://127.0.0.1:8123/data"
        assert str(response.request.url) == "https://just.made.this.up.com/data"

    def test_delegate_failure_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        transport = RedirectingTransport(httpx.MockTransport(handler), TARGET)
        with httpx.Client(transport=transport) as client, pytest.raises(httpx.ConnectError):
            client.get("http://example.com/")

    def test_close_closes_delegate(self) -> None:
        closed: list[bool] = []

        class Delegate(httpx.BaseTransport):
            def handle_request(self, request: httpx.Request) -> httpx.Response:
                return httpx.Response(204)

            def close(self) -> None:
                closed.append(True)

        RedirectingTransport(Delegate(), TARGET).close()
        assert closed == [True]


class TestAsyncRedirectingTransport:
    async def test_delegate_sees_rewritten_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="ok")

        transport = AsyncRedirectingTransport(httpx.MockTransport(handler), TARGET)
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.put("https://api.example.com/items/1", content=b"{}")

        assert response.text == "ok"
        assert seen[0].url.host == "127.0.0.1"
        assert seen[0].method == "PUT"
