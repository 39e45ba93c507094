"""Path utilities, percent-encoding and MIME type guessing."""

from __future__ import annotations

import mimetypes
import re
from urllib.parse import quote, unquote

# =============================================================================
# Content types
# =============================================================================

# Content types whose documents can be scanned for links
BROWSABLE_MIME_PREFIXES = (
    "text/html",
    "application/xhtml+xml",
    "application/xml",
    "text/xml",
)

SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def guess_mime_type(filename: str) -> str | None:
    """Guess the MIME type of a file based on its name, ``None`` if unknown."""
    mime_type, _ = mimetypes.guess_type(filename, strict=False)
    return mime_type


def is_browsable_mime_type(mime_type: str | None) -> bool:
    """Check if *mime_type* is an HTML/XHTML/XML type that can be parsed for links.

    Parameters such as ``; charset=utf-8`` are ignored.
    """
    if not mime_type:
        return False
    mime_type = mime_type.strip().lower()
    return mime_type.startswith(BROWSABLE_MIME_PREFIXES)


def get_charset(content_type: str | None) -> str | None:
    """Extract the ``charset`` parameter from a Content-Type header value."""
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            return value.strip().strip("\"'")
    return None


# =============================================================================
# Percent-encoding
# =============================================================================


def encode_component(value: str) -> str:
    """Percent-encode a login or password for inclusion in a locator.

    Every character outside ``A-Z a-z 0-9 - . _ ~`` is encoded, including
    ``: @ & = + $ , / ? # [ ] %`` and non-ASCII characters (as UTF-8).

    Examples:
        encode_component("a@b") -> "a%40b"
        encode_component(":/") -> "%3A%2F"
    """
    return quote(value, safe="")


def decode_component(value: str) -> str:
    """Reverse :func:`encode_component`."""
    return unquote(value)


# =============================================================================
# Path Utilities
# =============================================================================


def normalize_path(path: str | None) -> str:
    """Normalize a locator path.

    - Empty / None becomes the root ``"/"``
    - Ensures a leading ``/``

    Unlike a filesystem path, ``..`` and duplicate separators are kept as-is:
    remote servers decide what they mean.

    Examples:
        normalize_path(None) -> "/"
        normalize_path("") -> "/"
        normalize_path("path/to") -> "/path/to"
        normalize_path("/path/to/") -> "/path/to/"
    """
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    return path


def strip_trailing_separator(path: str, separator: str = "/") -> str:
    """Remove exactly one trailing separator, leaving the root untouched.

    Examples:
        strip_trailing_separator("/foo/") -> "/foo"
        strip_trailing_separator("/foo") -> "/foo"
        strip_trailing_separator("/") -> "/"
    """
    if path != "/" and path != separator and path.endswith(separator):
        return path[: -len(separator)]
    return path


def split_path(path: str, separator: str = "/") -> tuple[str, str]:
    """Split *path* into (parent_path, filename).

    Trailing separators are ignored.  The parent path keeps its trailing
    separator; the root has no filename.

    Examples:
        split_path("/foo/bar.txt") -> ("/foo/", "bar.txt")
        split_path("/foo/bar/") -> ("/foo/", "bar")
        split_path("/foo.txt") -> ("/", "foo.txt")
        split_path("/") -> ("/", "")
    """
    stripped = path
    while True:
        shorter = strip_trailing_separator(stripped, separator)
        if shorter == stripped:
            break
        stripped = shorter
    if stripped in ("/", separator, ""):
        return "/", ""
    idx = stripped.rfind(separator)
    if idx == -1:
        # Only the leading "/" precedes the name (non-"/" separators)
        return "/", stripped.lstrip("/")
    return stripped[: idx + len(separator)], stripped[idx + len(separator):]


def get_extension(filename: str | None) -> str | None:
    """Return the part after the last ``.``, or ``None`` if there is none.

    Leading dots (hidden files) and trailing dots don't count.

    Examples:
        get_extension("archive.tar.gz") -> "gz"
        get_extension(".profile") -> None
        get_extension("README") -> None
    """
    if not filename:
        return None
    idx = filename.rfind(".")
    if idx <= 0 or idx == len(filename) - 1:
        return None
    return filename[idx + 1:]
