"""Shared fixtures for polyfs tests."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from polyfs.fs.permissions import FilePermissions
from polyfs.fs.protocol import ProtocolFile
from polyfs.fs.registry import SchemeRegistry
from polyfs.fs.schemes import SchemeHandler
from polyfs.fs.types import FileAttributes
from polyfs.fs.url import FileURL

if TYPE_CHECKING:
    from collections.abc import Callable


# ---------------------------------------------------------------------------
# In-memory adapter
# ---------------------------------------------------------------------------


class MemoryFile(ProtocolFile):
    """In-memory adapter: attributes are handed over at construction, resolved lazily."""

    def __init__(
        self,
        url: FileURL,
        *,
        is_directory: bool = False,
        size: int = 0,
        last_modified: datetime | None = None,
        exists: bool = True,
        permissions: FilePermissions | None = None,
        content: bytes = b"",
    ) -> None:
        super().__init__(url)
        self.stat = FileAttributes(
            exists=exists,
            is_directory=is_directory,
            size=size,
            last_modified=last_modified or datetime(2024, 1, 1, tzinfo=UTC),
            permissions=permissions or FilePermissions(0o644),
        )
        self.content = content
        self.children: list[ProtocolFile] = []
        self.link: ProtocolFile | None = None
        self.resolve_calls = 0

    def _resolve(self) -> None:
        self.resolve_calls += 1
        self._attributes = self.stat

    def _link_target(self) -> ProtocolFile | None:
        return self.link

    def ls(self) -> list[ProtocolFile]:
        return list(self.children)

    def open_read(self, offset: int = 0):
        return io.BytesIO(self.content[offset:])


@pytest.fixture
def registry() -> SchemeRegistry:
    """Fresh registry with the standard schemes, ``mem`` and a bare ``scheme``."""
    reg = SchemeRegistry.with_defaults()
    reg.register("mem", SchemeHandler(), MemoryFile)
    reg.register("scheme", SchemeHandler())
    return reg


@pytest.fixture
def make_file(registry: SchemeRegistry) -> Callable[..., MemoryFile]:
    """Factory: ``make_file("/dir/name.txt", size=10, ...)`` -> MemoryFile on ``mem://host``."""

    def _make(path: str, **kwargs: Any) -> MemoryFile:
        return MemoryFile(FileURL.parse(f"mem://host{path}", registry=registry), **kwargs)

    return _make


# ---------------------------------------------------------------------------
# Fake HTTP session
# ---------------------------------------------------------------------------


def make_response(
    status: int = 200,
    body: bytes = b"",
    headers: dict[str, str] | None = None,
    *,
    url: str = "",
    reason: str | None = None,
    raw: Any = None,
) -> requests.Response:
    """Build a real ``requests.Response`` whose body streams from memory."""
    response = requests.Response()
    response.status_code = status
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = raw if raw is not None else io.BytesIO(body)
    response.url = url
    response.reason = reason
    return response


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    kwargs: dict[str, Any] = field(default_factory=dict)


class FakeSession:
    """Stands in for ``requests.Session``: answers from a route table, records every request.

    Unrouted requests get a 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[dict[str, str]], requests.Response]] = {}
        self.requests: list[RecordedRequest] = []

    def route(
        self,
        method: str,
        url: str,
        status: int = 200,
        body: bytes = b"",
        headers: dict[str, str] | None = None,
        reason: str | None = None,
    ) -> None:
        self.routes[(method, url)] = lambda _headers: make_response(
            status, body, headers, url=url, reason=reason
        )

    def route_handler(
        self, method: str, url: str, handler: Callable[[dict[str, str]], requests.Response]
    ) -> None:
        self.routes[(method, url)] = handler

    def route_ranges(self, url: str, content: bytes) -> None:
        """Serve *content* at *url*, honouring ``Range`` headers, with a matching HEAD."""
        self.route("HEAD", url, headers={"Content-Length": str(len(content))})

        def respond(headers: dict[str, str]) -> requests.Response:
            range_header = headers.get("Range")
            if range_header is None:
                return make_response(200, content, {"Content-Length": str(len(content))}, url=url)
            start_text, _, end_text = range_header.removeprefix("bytes=").partition("-")
            start = int(start_text)
            end = int(end_text) if end_text else len(content) - 1
            body = content[start : end + 1]
            return make_response(
                206,
                body,
                {
                    "Content-Length": str(len(body)),
                    "Content-Range": f"bytes {start}-{end}/{len(content)}",
                },
                url=url,
            )

        self.route_handler("GET", url, respond)

    def request(self, method: str, url: str, headers: dict[str, str] | None = None, **kwargs: Any):
        headers = dict(headers or {})
        self.requests.append(RecordedRequest(method, url, headers, kwargs))
        handler = self.routes.get((method, url))
        if handler is None:
            return make_response(404, url=url, reason="Not Found")
        return handler(headers)

    def requests_for(self, method: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
