"""Tests for the ``fixture_server`` pytest fixture."""

from nestbox.options import with_fixture, with_handler
from nestbox.server import ServerState


def test_fixture_server_serves(fixture_server, lorem_file) -> None:
    handle = fixture_server(with_fixture("/data", lorem_file))
    response = handle.client.get("https://just.made.this.up.com/data")
    assert response.status_code == 200
    assert response.text == "Lorem ipsum dolor sit amet"


def test_fixture_server_several_servers(fixture_server) -> None:
    first = fixture_server(with_handler("/who", lambda request: "first"))
    second = fixture_server(with_handler("/who", lambda request: "second"))
    assert first.client.get("/who").text == "first"
    assert second.client.get("/who").text == "second"


def test_servers_stopped_after_test(pytester) -> None:
    pytester.makeconftest("pytest_plugins = ['nestbox.testing']")
    pytester.makepyfile(
        """
        from nestbox.options import with_handler
        from nestbox.server import ServerState

        handles = []

        def test_start(fixture_server):
            handles.append(fixture_server(with_handler("/", lambda request: "ok")))
            assert handles[0].state is ServerState.LISTENING

        def test_stopped():
            assert handles[0].state is ServerState.STOPPED
        """
    )
    result = pytester.runpytest("-p", "no:nestbox")
    result.assert_outcomes(passed=2)


def test_crashed_server_fails_the_test(pytester) -> None:
    pytester.makeconftest("pytest_plugins = ['nestbox.testing']")
    pytester.makepyfile(
        """
        import uvicorn

        def test_crash(fixture_server, monkeypatch):
            async def broken(self, sockets=None):
                raise RuntimeError("boom")

            monkeypatch.setattr(uvicorn.Server, "serve", broken)
            handle = fixture_server()
            handle.failure.exception(timeout=5)
        """
    )
    result = pytester.runpytest("-p", "no:nestbox")
    result.assert_outcomes(passed=1, errors=1)
    result.stdout.fnmatch_lines(["*ServerCrashed*"])


def test_crash_does_not_leak_other_servers(pytester) -> None:
    pytester.makeconftest("pytest_plugins = ['nestbox.testing']")
    pytester.makepyfile(
        """
        import uvicorn

        from nestbox.options import with_handler
        from nestbox.server import ServerState

        handles = []

        def test_healthy_then_crashed(fixture_server, monkeypatch):
            handles.append(fixture_server(with_handler("/", lambda request: "ok")))

            async def broken(self, sockets=None):
                raise RuntimeError("boom")

            monkeypatch.setattr(uvicorn.Server, "serve", broken)
            crashed = fixture_server()
            crashed.failure.exception(timeout=5)

        def test_healthy_server_stopped():
            assert handles[0].state is ServerState.STOPPED
        """
    )
    result = pytester.runpytest("-p", "no:nestbox")
    result.assert_outcomes(passed=2, errors=1)
    result.stdout.fnmatch_lines(["*ServerCrashed*"])


def test_state_visible(fixture_server) -> None:
    assert fixture_server().state is ServerState.LISTENING
