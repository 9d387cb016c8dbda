"""Invoke helper — call sync or async handlers uniformly.

Fixture handlers can be ``def`` or ``async def``. The fixture application
and the method filter both call user handlers, so the sync/async check
lives here once.

Coroutine functions run on the event loop. Everything else runs in an
anyio worker thread, so a blocking ``def`` handler only holds up its own
request, and may even call back into its own fixture server.

Usage::

    from nestbox._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine."""
    if inspect.iscoroutinefunction(handler):
        return await handler(*args, **kwargs)
    result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result
