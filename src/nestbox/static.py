"""Static file handler.

Serves a single file for a route. The file is read on every request,
never at configuration time, so a test can rewrite the fixture file after
building the server and the next request sees the new content.

Single byte ranges are honoured (206 / 416) so fixtures can stand in for
servers that resumable or chunked downloads talk to.
"""

import json
import logging
import mimetypes
from datetime import timezone
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path

import anyio

from nestbox._internal.types import Handler
from nestbox.http.request import Request
from nestbox.http.response import Response, not_found

logger = logging.getLogger("nestbox.static")

INDEX_FILE = "index.html"

# Leading-byte signatures for files without a telling extension
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"%PDF-", "application/pdf"),
)
_HTML_TAGS = (
    b"<!doctype html",
    b"<html",
    b"<head",
    b"<body",
    b"<script",
    b"<title",
    b"<div",
    b"<p",
    b"<!--",
)
_SNIFF_LEN = 512


class _RangeNotSatisfiable(Exception):
    pass


def serve_file(file_path: str | Path) -> Handler:
    """Return a handler that answers with the current content of *file_path*.

    A directory serves its ``index.html`` when present. Missing files map
    to 404, unreadable ones to 403, and any other OS error to 500.
    """
    path = anyio.Path(file_path)

    async def handler(request: Request) -> Response:
        try:
            target = path
            if await target.is_dir():
                target = target / INDEX_FILE
            stat = await target.stat()
            if _not_modified(request, stat.st_mtime):
                return Response(body=b"", status=304).with_header(
                    "Last-Modified", formatdate(stat.st_mtime, usegmt=True)
                )
            body = await target.read_bytes()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            return not_found()
        except PermissionError:
            return Response(body="403 Forbidden", status=403)
        except OSError:
            logger.exception("Reading fixture file %s failed", file_path)
            return Response(body="500 Internal Server Error", status=500)

        size = len(body)
        try:
            byte_range = _byte_range(request, size)
        except _RangeNotSatisfiable:
            return Response(body="416 Requested Range Not Satisfiable", status=416).with_header(
                "Content-Range", f"bytes */{size}"
            )

        content_type = _content_type(target, body)
        if byte_range is None:
            response = Response(body=body, content_type=content_type)
        else:
            start, end = byte_range
            response = Response(
                body=body[start : end + 1], status=206, content_type=content_type
            ).with_header("Content-Range", f"bytes {start}-{end}/{size}")
        return response.with_header("Accept-Ranges", "bytes").with_header(
            "Last-Modified", formatdate(stat.st_mtime, usegmt=True)
        )

    return handler


def _byte_range(request: Request, size: int) -> tuple[int, int] | None:
    """Return the inclusive ``(start, end)`` of a single byte range.

    ``None`` means serve the whole file: no Range header, a method other
    than GET/HEAD, a unit other than bytes, several ranges, or a header
    that does not parse.

    Raises ``_RangeNotSatisfiable`` when the range starts past the end.
    """
    header = request.headers.get("range")
    if not header or request.method not in ("GET", "HEAD"):
        return None
    unit, _, spec = header.partition("=")
    if unit.strip().lower() != "bytes" or "," in spec:
        return None
    first, dash, last = spec.strip().partition("-")
    if not dash:
        return None

    try:
        if not first:
            # Suffix range: the last N bytes
            length = int(last)
            if length <= 0:
                raise _RangeNotSatisfiable
            start, end = max(0, size - length), size - 1
        else:
            start = int(first)
            end = int(last) if last else size - 1
    except ValueError:
        return None

    if start < 0 or end < start:
        return None
    if start >= size:
        raise _RangeNotSatisfiable
    return start, min(end, size - 1)


def _content_type(path: anyio.Path, body: bytes) -> str:
    """Guess from the extension, else sniff the leading bytes."""
    content_type, _ = mimetypes.guess_type(str(path))
    if content_type is None:
        return _sniff(body)
    if content_type.startswith("text/"):
        return f"{content_type}; charset=utf-8"
    return content_type


def _sniff(body: bytes) -> str:
    head = body[:_SNIFF_LEN]
    for signature, content_type in _SIGNATURES:
        if head.startswith(signature):
            return content_type

    text = head.lstrip(b" \t\r\n").lower()
    for tag in _HTML_TAGS:
        if text.startswith(tag) and text[len(tag) : len(tag) + 1] in (b" ", b">", b""):
            return "text/html; charset=utf-8"
    if text.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"

    if text[:1] in (b"{", b"["):
        try:
            json.loads(body)
        except ValueError:
            pass
        else:
            return "application/json"

    try:
        body.decode("utf-8")
    except UnicodeDecodeError:
        return "application/octet-stream"
    return "text/plain; charset=utf-8"


def _not_modified(request: Request, mtime: float) -> bool:
    if request.method not in ("GET", "HEAD"):
        return False
    header = request.headers.get("if-modified-since")
    if not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    # HTTP dates have one-second resolution
    return int(mtime) <= since.timestamp()
