"""Method filter — restrict a handler to an allow-list of HTTP methods.

A disallowed method gets the same 404 (empty body) as an unregistered
path, not a 405. Test code may depend on that status, so keep it.
"""

from functools import wraps
from typing import Any

from nestbox._internal.invoke import invoke
from nestbox._internal.types import Handler
from nestbox.http.request import Request
from nestbox.http.response import not_found


def allowed(handler: Handler, *methods: str) -> Handler:
    """Wrap *handler* so only requests using one of *methods* reach it.

    With no methods the handler is returned unchanged. Matching is an
    exact string comparison against ``request.method``.
    """
    if not methods:
        return handler

    @wraps(handler)
    async def filtered(request: Request) -> Any:
        for method in methods:
            if request.method == method:
                return await invoke(handler, request)
        return not_found()

    return filtered
