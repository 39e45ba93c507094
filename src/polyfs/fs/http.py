"""HTTPFile: read-only access to resources on HTTP/HTTPS servers.

HTML, XHTML and XML documents are treated as directories: listing one
fetches it and turns every ``href``/``src`` link below its containing path
into a child file.

To avoid a round trip per file, the URL alone decides whether a file looks
like a document (no filename, trailing ``/``, a query, or an extension that
maps to an HTML or XML type).  Such files are directories straight away; other
files are resolved with a ``HEAD`` request the first time an attribute is
read.

Credentials in the FileURL are sent as HTTP Basic authentication, and only
to the host they were given for.
"""

from __future__ import annotations

import codecs
import logging
import platform
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING
from urllib.parse import unquote, urldefrag, urljoin, urlsplit

import requests

from .exceptions import (
    AuthenticationRequiredError,
    MalformedURLError,
    PartialListingError,
    PolyfsError,
    TooManyRedirectsError,
    TransportError,
    UnsupportedOperationError,
)
from .permissions import READ_ONLY_USER
from .protocol import ProtocolFile
from .streams import BlockRandomInputStream, ChunkedInputStream
from .types import FileOperation
from .url import FileURL
from .utils import get_charset, guess_mime_type, is_browsable_mime_type

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import BinaryIO

logger = logging.getLogger(__name__)

HTTP_SCHEMES = ("http", "https")

DEFAULT_USER_AGENT = (
    f"polyfs-file-api (Python {platform.python_version()}; "
    f"{platform.system()} {platform.release()} {platform.machine()})"
)

# href/src attribute values, one pattern per quoting style
LINK_PATTERN_SQ = re.compile(r"(?:src|href|SRC|HREF)='(.*?)'")
LINK_PATTERN_DQ = re.compile(r"(?:src|href|SRC|HREF)=\"(.*?)\"")

# Links that don't designate a downloadable resource
IGNORED_LINK_PREFIXES = ("mailto", "#", "javascript:")


@dataclass
class HTTPConfig:
    """Configuration shared by an HTTPFile and the files derived from it."""

    timeout: float = 30.0
    """Seconds to wait for the server to connect or send data."""

    user_agent: str = DEFAULT_USER_AGENT
    """Value of the ``User-Agent`` header sent with every request."""

    max_redirects: int = 10
    """Redirects followed when listing before giving up."""

    block_size: int = 1024
    """Bytes fetched per request by random-access streams."""

    verify: bool = True
    """Verify TLS certificates."""

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive: {self.timeout}")
        if self.max_redirects < 0:
            raise ValueError(f"max_redirects cannot be negative: {self.max_redirects}")
        if self.block_size < 1:
            raise ValueError(f"Block size must be positive: {self.block_size}")


def _parse_http_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_content_length(value: str | None) -> int:
    if value is None:
        return -1
    try:
        length = int(value)
    except ValueError:
        return -1
    return length if length >= 0 else -1


def _containing_directory(url: FileURL) -> tuple:
    """Scheme, host, port and directory path of *url*, normalized as in FileURL equality.

    ``http://Host:80/dir/page.html?q`` -> ``("http", "host", None, "/dir/")``
    """
    scheme, host, port = url.key()[:3]
    path = url.path[: url.path.rfind("/") + 1] or "/"
    return scheme, host, port, path


def _is_below(directory: tuple, url: FileURL) -> bool:
    scheme, host, port, path = directory
    return url.key()[:3] == (scheme, host, port) and url.path.startswith(path)


def _is_downloadable(link: str) -> bool:
    return not link.lower().startswith(IGNORED_LINK_PREFIXES)


class HTTPFile(ProtocolFile):
    """A resource on an HTTP or HTTPS server.  Read-only.

    Construction performs no network call.  Pass *session* to share
    connection pooling (and to substitute a fake session in tests).
    """

    def __init__(
        self,
        url: FileURL,
        *,
        session: requests.Session | None = None,
        config: HTTPConfig | None = None,
    ) -> None:
        if url.scheme.lower() not in HTTP_SCHEMES or url.host is None:
            raise MalformedURLError(f"Not an HTTP URL: {url}")
        super().__init__(url)
        self.config = config or HTTPConfig()
        self._session = session
        self._attributes.permissions = READ_ONLY_USER

        if self._looks_browsable():
            self._attributes.is_directory = True
            self._resolve_on_demand = False

    def _looks_browsable(self) -> bool:
        filename = self._url.filename
        return (
            filename is None
            or self._url.path.endswith("/")
            or self._url.query is not None
            or is_browsable_mime_type(guess_mime_type(filename))
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def request_url(self) -> str:
        """The URL sent on the wire: no credentials, query included."""
        return self._url.to_string()

    @property
    def name(self) -> str:
        return unquote(super().name)

    def is_hidden(self) -> bool:
        """Web resources are never hidden, whatever their name."""
        return False

    def _create(self, url: FileURL) -> ProtocolFile:
        if url.scheme.lower() in HTTP_SCHEMES and url.host is not None:
            return HTTPFile(url, session=self.session, config=self.config)
        return super()._create(url)

    # =========================================================================
    # Requests
    # =========================================================================

    def _request(
        self,
        method: str,
        target: str | None = None,
        *,
        headers: dict[str, str] | None = None,
        stream: bool = False,
        allow_redirects: bool = True,
    ) -> requests.Response:
        """Send a request and check its status.

        Raises:
            AuthenticationRequiredError: the server answered 401.
            TransportError: the request failed or the status is not 2xx/3xx.
        """
        target = target or self.request_url
        request_headers = {"User-Agent": self.config.user_agent}
        if headers:
            request_headers.update(headers)

        auth = None
        credentials = self._url.credentials
        if credentials is not None and urlsplit(target).hostname == urlsplit(self.request_url).hostname:
            auth = (credentials.login, credentials.password)

        try:
            response = self.session.request(
                method,
                target,
                headers=request_headers,
                auth=auth,
                timeout=self.config.timeout,
                stream=stream,
                allow_redirects=allow_redirects,
                verify=self.config.verify,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {target} failed: {e}") from e

        logger.debug("%s %s -> %s", method, target, response.status_code)
        self._check_response(response, target)
        return response

    def _check_response(self, response: requests.Response, target: str) -> None:
        status = response.status_code
        if status == 401:
            response.close()
            raise AuthenticationRequiredError(self._url, response.reason)
        if status < 200 or status >= 400:
            response.close()
            raise TransportError(f"HTTP {status} {response.reason or ''}: {target}".rstrip())

    def _iter_body(self, response: requests.Response, chunk_size: int) -> Iterator[bytes]:
        try:
            yield from response.iter_content(chunk_size=chunk_size)
        except requests.RequestException as e:
            raise TransportError(f"Reading {self.request_url} failed: {e}") from e

    # =========================================================================
    # Resolution
    # =========================================================================

    def _resolve(self) -> None:
        logger.info("Resolving %s", self._url)
        response = self._request("HEAD")
        try:
            headers = response.headers
            self._attributes.last_modified = (
                _parse_http_date(headers.get("Last-Modified"))
                or _parse_http_date(headers.get("Date"))
                or datetime.now(UTC)
            )
            self._attributes.size = _parse_content_length(headers.get("Content-Length"))
            if is_browsable_mime_type(headers.get("Content-Type")):
                self._attributes.is_directory = True
            self._attributes.exists = True
        finally:
            response.close()

    # =========================================================================
    # Reading
    # =========================================================================

    def open_read(self, offset: int = 0) -> BinaryIO:
        """Open the resource body, starting at *offset*.

        A non-zero offset is requested with a ``Range`` header; if the
        server does not answer with partial content, the stream is refused
        rather than restarted from zero.
        """
        if offset < 0:
            raise ValueError(f"Negative offset: {offset}")
        headers = {"Range": f"bytes={offset}-"} if offset else None
        response = self._request("GET", headers=headers, stream=True)
        if offset and response.status_code != 206:
            response.close()
            raise UnsupportedOperationError(FileOperation.RANDOM_READ_FILE)
        chunks = self._iter_body(response, self.config.block_size)
        return ChunkedInputStream(chunks, on_close=response.close)  # type: ignore[return-value]

    def open_random_read(self) -> BinaryIO:
        """Open a seekable stream that fetches ``config.block_size`` bytes per request.

        The content length must be known.
        """
        self._ensure_resolved(always=True)
        length = self._attributes.size
        if length < 0:
            raise TransportError(f"Content length unknown: {self.request_url}")
        return HTTPRandomAccessInputStream(self, length)  # type: ignore[return-value]

    # =========================================================================
    # Listing
    # =========================================================================

    def _open_document(self) -> tuple[requests.Response, str]:
        """GET this file, following redirects by hand to learn the final URL."""
        target = self.request_url
        for _ in range(self.config.max_redirects + 1):
            response = self._request("GET", target, stream=True, allow_redirects=False)
            location = response.headers.get("Location")
            if 300 <= response.status_code < 400 and location:
                response.close()
                target = urljoin(target, location)
                logger.debug("Location header = %s", location)
                continue
            return response, target
        raise TooManyRedirectsError(f"Too many redirects: {self.request_url}")

    def ls(self) -> list[ProtocolFile]:
        """Fetch this document and return the files its links point to.

        Raises:
            TransportError: the document could not be fetched or is not
                HTML/XHTML/XML.
            PartialListingError: reading failed midway; ``children`` holds
                the files found so far.
        """
        response, final_url = self._open_document()
        try:
            content_type = response.headers.get("Content-Type")
            if not is_browsable_mime_type(content_type):
                raise TransportError(f"Document cannot be parsed (not HTML or XHTML): {final_url}")
            response.encoding = self._pick_encoding(content_type)

            children: list[ProtocolFile] = []
            seen: set[str] = set()
            document = FileURL.parse(final_url, registry=self._url.registry)
            directory = _containing_directory(document)
            try:
                for line in response.iter_lines(decode_unicode=True):
                    for link in self._extract_links(line):
                        child = self._make_child(link, document, directory, seen)
                        if child is not None:
                            children.append(child)
            except requests.RequestException as e:
                raise PartialListingError(f"Listing {final_url} interrupted: {e}", children) from e
            return children
        finally:
            response.close()

    @staticmethod
    def _pick_encoding(content_type: str | None) -> str:
        charset = get_charset(content_type)
        if charset:
            try:
                codecs.lookup(charset)
            except LookupError:
                logger.debug("Unknown charset %s, falling back to utf-8", charset)
            else:
                return charset
        return "utf-8"

    @staticmethod
    def _extract_links(line: str) -> Iterator[str]:
        for pattern in (LINK_PATTERN_SQ, LINK_PATTERN_DQ):
            for match in pattern.finditer(line):
                yield match.group(1)

    def _make_child(
        self, link: str, document: FileURL, directory: tuple, seen: set[str]
    ) -> ProtocolFile | None:
        if not _is_downloadable(link) or link in seen:
            return None

        final_url = document.to_string()
        child_text, _ = urldefrag(urljoin(final_url, link))
        try:
            child_url = FileURL.parse(child_text, registry=self._url.registry)
        except PolyfsError:
            logger.debug("Cannot create child %s (context=%s)", link, final_url, exc_info=True)
            return None

        # Keep only what lies below the containing path, excluding the directory and the document
        if not _is_below(directory, child_url) or child_url == document:
            return None
        if child_url.path == directory[3] and child_url.query is None:
            return None

        # Credentials never travel to another host
        if child_url.host and self._url.host and child_url.host.lower() == self._url.host.lower():
            child_url.credentials = self._url.credentials

        seen.add(link)
        logger.debug("Creating child %s context=%s", child_text, final_url)
        return self._create(child_url)


class HTTPRandomAccessInputStream(BlockRandomInputStream):
    """Random read access to an HTTPFile, one ``Range`` request per block."""

    def __init__(self, file: HTTPFile, length: int) -> None:
        super().__init__(file.config.block_size)
        self._file = file
        self._length = length

    @property
    def length(self) -> int:
        return self._length

    def _read_block(self, offset: int, size: int) -> bytes:
        end = min(offset + size, self._length) - 1
        response = self._file._request("GET", headers={"Range": f"bytes={offset}-{end}"}, stream=True)
        try:
            if response.status_code != 206:
                raise UnsupportedOperationError(FileOperation.RANDOM_READ_FILE)
            block = bytearray()
            for chunk in response.iter_content(chunk_size=size):
                block += chunk
                if len(block) >= size:
                    break
            return bytes(block[:size])
        except requests.RequestException as e:
            raise TransportError(f"Reading block at {offset} failed: {e}") from e
        finally:
            response.close()
