"""Shared type aliases used across nestbox modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — receives a Request, returns a Response, str, or bytes
Handler: TypeAlias = Callable[..., Any]
