"""Fixture server configuration.

ServerConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Fixture server configuration. Immutable after creation.

    All fields have defaults suited to a test process. Override what you need::

        config = ServerConfig(shutdown_timeout=1.0, on_fault=print)
    """

    # Listener
    host: str = "127.0.0.1"
    port: int = 0  # 0 = OS-assigned ephemeral port
    backlog: int = 128

    # Teardown
    shutdown_timeout: float = 5.0  # Seconds before in-flight work is cut off

    # uvicorn's own loggers (access logging is always off)
    log_level: str = "warning"

    # Called from the serve thread when the serve loop dies unexpectedly.
    # The fault is still re-raised as ServerCrashed from the teardown.
    on_fault: Callable[[BaseException], None] | None = None
