"""Custom exception hierarchy for the polyfs filesystem layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol import ProtocolFile
    from .types import FileOperation
    from .url import FileURL


class PolyfsError(Exception):
    """Base exception for all polyfs filesystem errors."""


class MalformedURLError(PolyfsError, ValueError):
    """Raised when a locator does not match ``scheme://[login[:password]@]host[:port]path[?query]``."""


class UnknownSchemeError(PolyfsError):
    """Raised when no handler (or no file factory) is registered for a scheme."""

    def __init__(self, scheme: str, message: str | None = None) -> None:
        super().__init__(message or f"Unknown scheme: {scheme}")
        self.scheme = scheme


class UnsupportedOperationError(PolyfsError):
    """Raised when a file adapter doesn't support a requested operation."""

    def __init__(self, operation: FileOperation) -> None:
        super().__init__(f"Operation not supported: {operation.value}")
        self.operation = operation


class AuthenticationRequiredError(PolyfsError):
    """Raised when a remote endpoint demands credentials.

    ``url`` is the locator that was refused; callers prompt for credentials,
    set them on a copy of the URL and retry.
    """

    def __init__(self, url: FileURL, reason: str | None = None) -> None:
        super().__init__(f"Authentication required: {url}" + (f" ({reason})" if reason else ""))
        self.url = url
        self.reason = reason


class TransportError(PolyfsError):
    """Raised on connection, timeout, protocol or response parsing failures."""


class TooManyRedirectsError(TransportError):
    """Raised when a redirect chain exceeds the configured maximum."""


class PartialListingError(TransportError):
    """Raised when a listing fails after some children were already parsed."""

    def __init__(self, message: str, children: list[ProtocolFile]) -> None:
        super().__init__(message)
        self.children = children


class CyclicReferenceError(PolyfsError):
    """Raised when link resolution revisits a file it has already seen."""

    def __init__(self, url: FileURL) -> None:
        super().__init__(f"Cyclic reference detected at: {url}")
        self.url = url
