"""SchemeRegistry: maps schemes to their handler and file factory."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .exceptions import UnknownSchemeError
from .schemes import STANDARD_HANDLERS

if TYPE_CHECKING:
    from collections.abc import Callable

    from .protocol import ProtocolFile
    from .schemes import SchemeHandler
    from .url import FileURL

    FileFactory = Callable[[FileURL], ProtocolFile]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SchemeEntry:
    """One registered scheme."""

    scheme: str
    """Lower-case scheme name, e.g. "http"."""

    handler: SchemeHandler
    """Policy applied to every FileURL of this scheme."""

    factory: FileFactory | None = None
    """Builds a ProtocolFile for a FileURL.  ``None`` if the scheme has no adapter."""


class SchemeRegistry:
    """Registry of known schemes.

    Resolves a scheme name to its :class:`SchemeHandler` (used by the URL
    parser for ports, separators and query rules) and to the factory that
    turns a FileURL into a :class:`ProtocolFile`.

    Registries are plain objects: build one per test or per application and
    pass it around.  :func:`get_default_registry` holds the shared instance
    used when none is given.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SchemeEntry] = {}

    @classmethod
    def with_defaults(cls) -> SchemeRegistry:
        """Build a registry holding the standard handlers and the HTTP adapter."""
        from .http import HTTPFile

        registry = cls()
        for scheme, handler in STANDARD_HANDLERS.items():
            registry.register(scheme, handler)
        registry.register("http", STANDARD_HANDLERS["http"], HTTPFile)
        registry.register("https", STANDARD_HANDLERS["https"], HTTPFile)
        return registry

    def register(
        self,
        scheme: str,
        handler: SchemeHandler,
        factory: FileFactory | None = None,
    ) -> None:
        """Add or replace a scheme."""
        key = scheme.lower()
        if key in self._entries:
            logger.debug("Replacing handler for scheme %s", key)
        self._entries[key] = SchemeEntry(scheme=key, handler=handler, factory=factory)

    def get_handler(self, scheme: str) -> SchemeHandler:
        """Return the handler for *scheme* or raise :class:`UnknownSchemeError`."""
        entry = self._entries.get(scheme.lower())
        if entry is None:
            raise UnknownSchemeError(scheme)
        return entry.handler

    def get_factory(self, scheme: str) -> FileFactory:
        """Return the file factory for *scheme* or raise :class:`UnknownSchemeError`."""
        entry = self._entries.get(scheme.lower())
        if entry is None:
            raise UnknownSchemeError(scheme)
        if entry.factory is None:
            raise UnknownSchemeError(scheme, f"No file adapter registered for scheme: {scheme}")
        return entry.factory

    def has_scheme(self, scheme: str) -> bool:
        """Check if *scheme* is registered."""
        return scheme.lower() in self._entries

    def list_schemes(self) -> list[str]:
        """List registered scheme names, sorted."""
        return sorted(self._entries)

    def parse(self, text: str) -> FileURL:
        """Parse *text* into a FileURL bound to this registry."""
        from .url import FileURL

        return FileURL.parse(text, registry=self)

    def create_file(self, url: FileURL | str) -> ProtocolFile:
        """Instantiate the adapter registered for the URL's scheme.

        Strings are parsed against this registry first.
        """
        if isinstance(url, str):
            url = self.parse(url)
        return self.get_factory(url.scheme)(url)


_default_registry: SchemeRegistry | None = None
_default_lock = threading.Lock()


def get_default_registry() -> SchemeRegistry:
    """Return the process-wide registry, building it with the defaults on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = SchemeRegistry.with_defaults()
        return _default_registry
