"""Nestbox exception hierarchy.

Shared across the fixture application, handlers, and the lifecycle
manager so every module raises and catches the same types.
"""

from dataclasses import dataclass


class NestboxError(Exception):
    """Base for all nestbox-specific errors."""


class ServerStartupError(NestboxError):
    """Raised when the fixture listener cannot be bound.

    The fixture is useless without an address, so there is no recovery
    path: construction aborts and the error propagates to the test.
    """


class ServerCrashed(NestboxError):
    """Raised at teardown when the serve loop died with an unexpected error.

    The original exception is chained as ``__cause__``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(NestboxError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers. The fixture application catches these and
    answers with ``status``, ``detail`` as the body, and ``headers``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 with an empty body.

    Same signal for an unregistered path and for a method the route's
    filter does not allow.
    """

    def __init__(self, detail: str = "") -> None:
        super().__init__(status=404, detail=detail)
