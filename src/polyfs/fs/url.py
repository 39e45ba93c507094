"""FileURL: parsed, normalized resource locator.

Grammar::

    scheme://[login[:password]@]host[:port]path[?query]

The scheme selects a :class:`SchemeHandler` from a :class:`SchemeRegistry`;
the handler supplies the standard port, the path separator and whether the
query part is split out of the path.  A FileURL is mutable: every setter
re-validates and normalizes its value, so a FileURL is always well-formed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .credentials import PASSWORD_MASK, Credentials
from .exceptions import MalformedURLError
from .registry import get_default_registry
from .utils import (
    SCHEME_PATTERN,
    decode_component,
    encode_component,
    normalize_path,
    split_path,
    strip_trailing_separator,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .registry import SchemeRegistry
    from .schemes import AuthenticationType, SchemeHandler


def _validate_port(port: int | None) -> int | None:
    if port is None or port == -1:
        return None
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        raise MalformedURLError(f"Invalid port: {port!r}")
    return port


def _parse_port(text: str, locator: str) -> int | None:
    if not text:
        # "host:" is tolerated and means "no port"
        return None
    if not (text.isascii() and text.isdigit()):
        raise MalformedURLError(f"Non-numeric port in {locator!r}")
    port = int(text)
    if not 1 <= port <= 65535:
        raise MalformedURLError(f"Port out of range in {locator!r}")
    return port


class FileURL:
    """A locator identifying a resource and the scheme used to access it.

    Equality (``==`` and ``hash``) compares scheme and host case-insensitively,
    treats the standard port like no port, ignores one trailing path
    separator, and compares path and query exactly.  Credentials and
    properties are only compared through :meth:`equals` when requested.

    A FileURL used as a dict key must not be mutated while it is in the dict.
    """

    def __init__(
        self,
        scheme: str,
        *,
        host: str | None = None,
        port: int | None = None,
        path: str | None = "/",
        query: str | None = None,
        credentials: Credentials | None = None,
        properties: Mapping[str, str] | None = None,
        registry: SchemeRegistry | None = None,
    ) -> None:
        self._registry = registry if registry is not None else get_default_registry()
        self._scheme = ""
        self._handler: SchemeHandler
        self.scheme = scheme
        self._host: str | None = None
        self.host = host
        self._port: int | None = _validate_port(port)
        self._path = normalize_path(path)
        self._query = query
        self._credentials: Credentials | None = None
        self.credentials = credentials
        self._properties: dict[str, str] = {}
        for name, value in (properties or {}).items():
            self.set_property(name, value)

    # =========================================================================
    # Parsing
    # =========================================================================

    @classmethod
    def parse(cls, text: str, registry: SchemeRegistry | None = None) -> FileURL:
        """Parse a locator string.

        Credentials are delimited from the host by the *last* ``@`` before
        the first ``/`` following ``://``, so logins and passwords may contain
        raw ``@`` characters.  Login and password are percent-decoded.

        Raises:
            MalformedURLError: *text* is relative, has no scheme, or has an
                invalid port.
            UnknownSchemeError: the scheme is not registered.
        """
        if registry is None:
            registry = get_default_registry()

        sep_idx = text.find("://")
        if sep_idx <= 0:
            raise MalformedURLError(f"Not an absolute locator: {text!r}")
        scheme = text[:sep_idx]
        if not SCHEME_PATTERN.match(scheme):
            raise MalformedURLError(f"Invalid scheme in {text!r}")
        handler = registry.get_handler(scheme)

        rest = text[sep_idx + 3:]
        end = rest.find("/")
        if end == -1:
            end = len(rest)
        # Login and password may contain "?"; a query starts after the last "@"
        at = rest.rfind("@", 0, end)
        if handler.query_parsed:
            q = rest.find("?", at + 1, end)
            if q != -1:
                end = q
        authority, remainder = rest[at + 1:end], rest[end:]

        credentials = None
        if at != -1:
            login, _, password = rest[:at].partition(":")
            creds = Credentials(decode_component(login), decode_component(password))
            credentials = None if creds.is_empty else creds

        host, port = cls._split_host_port(authority, text)

        if handler.query_parsed:
            path, has_query, query = remainder.partition("?")
            query_part: str | None = query if has_query else None
        else:
            path, query_part = remainder, None

        return cls(
            scheme,
            host=host,
            port=port,
            path=path,
            query=query_part,
            credentials=credentials,
            registry=registry,
        )

    @staticmethod
    def _split_host_port(authority: str, locator: str) -> tuple[str | None, int | None]:
        if authority.startswith("["):
            # IPv6 literal
            close = authority.find("]")
            if close == -1:
                raise MalformedURLError(f"Unterminated IPv6 host in {locator!r}")
            host, tail = authority[: close + 1], authority[close + 1:]
            if tail and not tail.startswith(":"):
                raise MalformedURLError(f"Unexpected characters after host in {locator!r}")
            return host, _parse_port(tail[1:], locator)

        colon = authority.rfind(":")
        if colon == -1:
            return authority or None, None
        return authority[:colon] or None, _parse_port(authority[colon + 1:], locator)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_string(
        self,
        include_credentials: bool = False,
        mask_password: bool = False,
        include_query: bool = True,
    ) -> str:
        """Render this URL as a locator string.

        Credentials are percent-encoded; with *mask_password* the password is
        replaced by a fixed mask.  A standard port is never rendered.  When
        there is no host, a root path is omitted (``scheme://``).
        """
        parts = [self._scheme, "://"]

        if include_credentials and self._credentials is not None:
            parts.append(encode_component(self._credentials.login))
            if self._credentials.password:
                parts.append(":")
                parts.append(
                    PASSWORD_MASK if mask_password else encode_component(self._credentials.password)
                )
            parts.append("@")

        if self._host is not None:
            parts.append(self._host)
            if self._port is not None and self._port != self.standard_port:
                parts.append(f":{self._port}")

        if self._host is not None or self._path != "/":
            parts.append(self._path)

        if include_query and self._query is not None:
            parts.append("?")
            parts.append(self._query)

        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"FileURL({self.to_string(include_credentials=True, mask_password=True)!r})"

    # =========================================================================
    # Parts
    # =========================================================================

    @property
    def registry(self) -> SchemeRegistry:
        """The registry this URL resolves its scheme against."""
        return self._registry

    @property
    def handler(self) -> SchemeHandler:
        """The handler of the current scheme."""
        return self._handler

    @property
    def scheme(self) -> str:
        return self._scheme

    @scheme.setter
    def scheme(self, value: str) -> None:
        if not value or not SCHEME_PATTERN.match(value):
            raise MalformedURLError(f"Invalid scheme: {value!r}")
        self._handler = self._registry.get_handler(value)
        self._scheme = value

    @property
    def host(self) -> str | None:
        return self._host

    @host.setter
    def host(self, value: str | None) -> None:
        self._host = value or None

    @property
    def port(self) -> int | None:
        """The port, ``None`` if not set.  May equal :attr:`standard_port`."""
        return self._port

    @port.setter
    def port(self, value: int | None) -> None:
        self._port = _validate_port(value)

    @property
    def path(self) -> str:
        """The path, never empty and always starting with ``/``."""
        return self._path

    @path.setter
    def path(self, value: str | None) -> None:
        self._path = normalize_path(value)

    @property
    def query(self) -> str | None:
        return self._query

    @query.setter
    def query(self, value: str | None) -> None:
        self._query = value

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    @credentials.setter
    def credentials(self, value: Credentials | None) -> None:
        self._credentials = None if value is None or value.is_empty else value

    @property
    def has_credentials(self) -> bool:
        return self._credentials is not None

    @property
    def login(self) -> str | None:
        return self._credentials.login if self._credentials else None

    @property
    def password(self) -> str | None:
        return self._credentials.password if self._credentials else None

    # Handler shortcuts

    @property
    def standard_port(self) -> int | None:
        return self._handler.standard_port

    @property
    def guest_credentials(self) -> Credentials | None:
        return self._handler.guest_credentials

    @property
    def authentication_type(self) -> AuthenticationType:
        return self._handler.authentication_type

    @property
    def path_separator(self) -> str:
        return self._handler.path_separator

    # =========================================================================
    # Properties (arbitrary key/value pairs)
    # =========================================================================

    def get_property(self, name: str) -> str | None:
        return self._properties.get(name)

    def set_property(self, name: str, value: str | None) -> None:
        """Set a property; ``None`` removes it."""
        if value is None:
            self._properties.pop(name, None)
        else:
            self._properties[name] = value

    @property
    def property_names(self) -> list[str]:
        """Property names in insertion order."""
        return list(self._properties)

    @property
    def properties(self) -> dict[str, str]:
        """A copy of the property map."""
        return dict(self._properties)

    # =========================================================================
    # Derived URLs
    # =========================================================================

    @property
    def filename(self) -> str | None:
        """Last path segment, ``None`` at the root.  Trailing separators are ignored."""
        _, name = split_path(self._path, self.path_separator)
        return name or None

    @property
    def parent(self) -> FileURL | None:
        """This URL minus its last path segment, ``None`` at the root.

        Scheme, credentials, host, port and properties are kept; the query
        is dropped.  The parent path ends with a separator.
        """
        parent_path, name = split_path(self._path, self.path_separator)
        if not name:
            return None
        parent = self.copy()
        parent._path = parent_path
        parent._query = None
        return parent

    @property
    def realm(self) -> FileURL:
        """The root of this URL's server: same scheme, host and port, root path, no query."""
        realm = self.copy()
        realm._path = "/"
        realm._query = None
        return realm

    def copy(self) -> FileURL:
        """Return an independent copy, property map included."""
        clone = object.__new__(FileURL)
        clone._registry = self._registry
        clone._handler = self._handler
        clone._scheme = self._scheme
        clone._host = self._host
        clone._port = self._port
        clone._path = self._path
        clone._query = self._query
        clone._credentials = self._credentials
        clone._properties = dict(self._properties)
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, object]) -> FileURL:
        return self.copy()

    # =========================================================================
    # Equality
    # =========================================================================

    def key(self, compare_credentials: bool = False, compare_properties: bool = False) -> tuple:
        """Normalized identity tuple.

        Two URLs are :meth:`equals` under a given pair of flags exactly when
        their keys under the same flags are equal, so ``hash(url.key(...))``
        is a matching hash for every equality mode.
        """
        port = None if self._port == self.standard_port else self._port
        key: tuple = (
            self._scheme.lower(),
            self._host.lower() if self._host else None,
            port,
            strip_trailing_separator(self._path, self.path_separator),
            self._query,
        )
        if compare_credentials:
            creds = self._credentials
            key += ((creds.login, creds.password) if creds else None,)
        if compare_properties:
            key += (frozenset(self._properties.items()),)
        return key

    def equals(
        self,
        other: object,
        compare_credentials: bool = False,
        compare_properties: bool = False,
    ) -> bool:
        """Compare with *other*, optionally including credentials and/or properties."""
        if not isinstance(other, FileURL):
            return False
        return self.key(compare_credentials, compare_properties) == other.key(
            compare_credentials, compare_properties
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileURL):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self.key())
