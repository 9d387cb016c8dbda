"""Routing — immutable route table built from options before serving.

Routes are folded into a ``RouteTable`` when the server is constructed;
the table never changes once the server is listening.
"""

from nestbox.routing.filter import allowed
from nestbox.routing.route import Route
from nestbox.routing.table import RouteTable

__all__ = ["Route", "RouteTable", "allowed"]
