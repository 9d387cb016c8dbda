"""Immutable route table with multiplexer-style lookup.

Lookup rules:

- A pattern without a trailing slash matches only that exact path.
- A pattern ending in ``/`` matches every path below it.
- The longest matching pattern wins, so ``/`` catches whatever nothing
  more specific claims.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from nestbox.routing.route import Route


class RouteTable(Mapping[str, Route]):
    """Mapping of URL path pattern to ``Route``.

    Never mutated: ``with_route`` returns a new table. Registering a path
    that is already present replaces the earlier route (last write wins).

    Usage::

        table = RouteTable().with_route(Route("/data", handler))
        route = table.match("/data")
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Mapping[str, Route] | None = None) -> None:
        object.__setattr__(self, "_routes", MappingProxyType(dict(routes or {})))

    def __getitem__(self, path: str) -> Route:
        return self._routes[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({list(self._routes)!r})"

    def with_route(self, route: Route) -> RouteTable:
        """Return a new table with *route* added or replacing its path."""
        return RouteTable({**self._routes, route.path: route})

    def match(self, path: str) -> Route | None:
        """Return the route serving *path*, or ``None`` when nothing matches."""
        route = self._routes.get(path)
        if route is not None:
            return route

        best: Route | None = None
        for pattern, candidate in self._routes.items():
            if not pattern.endswith("/") or not path.startswith(pattern):
                continue
            if best is None or len(pattern) > len(best.path):
                best = candidate
        return best
