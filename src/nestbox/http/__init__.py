"""Immutable request and response types handed to fixture handlers."""

from nestbox.http.headers import Headers
from nestbox.http.query import QueryParams
from nestbox.http.request import Request
from nestbox.http.response import Response

__all__ = ["Headers", "QueryParams", "Request", "Response"]
