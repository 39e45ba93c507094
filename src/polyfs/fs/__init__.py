"""Filesystem layer: file URLs, scheme registry, protocol adapters, filters, sorting."""

from polyfs.fs.comparator import FileComparator, SortCriterion
from polyfs.fs.credentials import Credentials
from polyfs.fs.exceptions import (
    AuthenticationRequiredError,
    CyclicReferenceError,
    MalformedURLError,
    PartialListingError,
    PolyfsError,
    TooManyRedirectsError,
    TransportError,
    UnknownSchemeError,
    UnsupportedOperationError,
)
from polyfs.fs.filters import (
    AndFileFilter,
    AttributeFileFilter,
    ContainsFilenameFilter,
    EndsWithFilenameFilter,
    EqualsFilenameFilter,
    ExtensionFilenameFilter,
    FileAttribute,
    FileFilter,
    FilenameFilter,
    FileOperationFilter,
    GlobFilenameFilter,
    OrFileFilter,
    PassThroughFileFilter,
    PermissionsFileFilter,
    RegexpFilenameFilter,
    StartsWithFilenameFilter,
)
from polyfs.fs.http import HTTPConfig, HTTPFile
from polyfs.fs.permissions import FilePermissions, PermissionAccess, PermissionType
from polyfs.fs.protocol import ProtocolFile, unsupported
from polyfs.fs.registry import SchemeRegistry, get_default_registry
from polyfs.fs.schemes import AuthenticationType, SchemeHandler
from polyfs.fs.types import FileAttributes, FileOperation, ResolutionState
from polyfs.fs.url import FileURL

__all__ = [
    "AndFileFilter",
    "AttributeFileFilter",
    "AuthenticationRequiredError",
    "AuthenticationType",
    "ContainsFilenameFilter",
    "Credentials",
    "CyclicReferenceError",
    "EndsWithFilenameFilter",
    "EqualsFilenameFilter",
    "ExtensionFilenameFilter",
    "FileAttribute",
    "FileAttributes",
    "FileComparator",
    "FileFilter",
    "FileOperation",
    "FileOperationFilter",
    "FilePermissions",
    "FileURL",
    "FilenameFilter",
    "GlobFilenameFilter",
    "HTTPConfig",
    "HTTPFile",
    "MalformedURLError",
    "OrFileFilter",
    "PartialListingError",
    "PassThroughFileFilter",
    "PermissionAccess",
    "PermissionType",
    "PermissionsFileFilter",
    "PolyfsError",
    "ProtocolFile",
    "RegexpFilenameFilter",
    "ResolutionState",
    "SchemeHandler",
    "SchemeRegistry",
    "SortCriterion",
    "StartsWithFilenameFilter",
    "TooManyRedirectsError",
    "TransportError",
    "UnknownSchemeError",
    "UnsupportedOperationError",
    "get_default_registry",
    "unsupported",
]
