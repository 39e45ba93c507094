"""Polyfs: one file model across protocols.

Parse a locator, get a file, browse it::

    from polyfs import FileURL, get_default_registry

    url = FileURL.parse("https://example.com/pub/")
    directory = get_default_registry().create_file(url)
    for child in directory.list():
        print(child.name, child.get_size())
"""

__version__ = "0.0.1"

from polyfs.fs.comparator import FileComparator, SortCriterion
from polyfs.fs.credentials import Credentials
from polyfs.fs.exceptions import (
    AuthenticationRequiredError,
    MalformedURLError,
    PolyfsError,
    TransportError,
    UnknownSchemeError,
    UnsupportedOperationError,
)
from polyfs.fs.filters import AndFileFilter, AttributeFileFilter, FileAttribute, FileFilter, OrFileFilter
from polyfs.fs.http import HTTPConfig, HTTPFile
from polyfs.fs.protocol import ProtocolFile
from polyfs.fs.registry import SchemeRegistry, get_default_registry
from polyfs.fs.schemes import AuthenticationType, SchemeHandler
from polyfs.fs.types import FileOperation
from polyfs.fs.url import FileURL

__all__ = [
    "AndFileFilter",
    "AttributeFileFilter",
    "AuthenticationRequiredError",
    "AuthenticationType",
    "Credentials",
    "FileAttribute",
    "FileComparator",
    "FileFilter",
    "FileOperation",
    "FileURL",
    "HTTPConfig",
    "HTTPFile",
    "MalformedURLError",
    "OrFileFilter",
    "PolyfsError",
    "ProtocolFile",
    "SchemeHandler",
    "SchemeRegistry",
    "SortCriterion",
    "TransportError",
    "UnknownSchemeError",
    "UnsupportedOperationError",
    "get_default_registry",
    "__version__",
]
