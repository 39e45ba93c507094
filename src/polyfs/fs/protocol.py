"""ProtocolFile: the capability-based file contract every adapter implements.

One base class carries the full operation set.  Each operation's default
implementation raises :class:`UnsupportedOperationError` and is tagged with
:func:`unsupported`; adapters override only the operations they support.
:meth:`ProtocolFile.is_supported` inspects the tag, so callers can ask
whether an operation is available without invoking it.

Attributes (existence, type, size, date, permissions) may be resolved lazily:
adapters implement :meth:`ProtocolFile._resolve`, and the base class runs it
at most once per instance, even under concurrent first access.
"""

from __future__ import annotations

import functools
import logging
import threading
from abc import ABC
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import CyclicReferenceError, TransportError, UnsupportedOperationError
from .types import FileAttributes, FileOperation, ResolutionState
from .utils import get_extension

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from typing import BinaryIO

    from .filters import FileFilter
    from .permissions import FilePermissions, PermissionAccess, PermissionType
    from .url import FileURL

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound="Callable[..., Any]")

UNSUPPORTED_MARKER = "__unsupported_operation__"

OPERATION_METHODS: dict[FileOperation, str] = {
    FileOperation.READ_FILE: "open_read",
    FileOperation.WRITE_FILE: "open_write",
    FileOperation.APPEND_FILE: "open_append",
    FileOperation.RANDOM_READ_FILE: "open_random_read",
    FileOperation.RANDOM_WRITE_FILE: "open_random_write",
    FileOperation.LIST_CHILDREN: "ls",
    FileOperation.CREATE_DIRECTORY: "mkdir",
    FileOperation.DELETE: "delete",
    FileOperation.RENAME: "rename_to",
    FileOperation.CHANGE_DATE: "change_date",
    FileOperation.CHANGE_PERMISSION: "change_permission",
    FileOperation.GET_FREE_SPACE: "get_free_space",
    FileOperation.GET_TOTAL_SPACE: "get_total_space",
    FileOperation.COPY_REMOTELY: "copy_remotely_to",
}
"""Method implementing each operation."""


def unsupported(operation: FileOperation) -> Callable[[_F], _F]:
    """Turn a method into one that always raises ``UnsupportedOperationError(operation)``.

    The wrapped method is tagged so :meth:`ProtocolFile.is_supported` reports
    *operation* as unsupported.
    """

    def decorator(func: _F) -> _F:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            raise UnsupportedOperationError(operation)

        setattr(wrapper, UNSUPPORTED_MARKER, operation)
        return wrapper  # type: ignore[return-value]

    return decorator


class ProtocolFile(ABC):
    """A file or directory reachable through one scheme.

    Identified 1:1 by its :class:`FileURL`.  The parent is derived from the
    URL and cached on first access; files never keep references to their
    children.

    Subclasses may implement:
    - _resolve(): fetch attributes into ``self._attributes``
    - _link_target(): the file this one points to, if it is a link
    - any operation in :data:`OPERATION_METHODS`
    """

    def __init__(self, url: FileURL) -> None:
        self._url = url
        self._attributes = FileAttributes()
        self._state = ResolutionState.UNRESOLVED
        self._resolve_on_demand = True
        self._resolve_lock = threading.Lock()
        self._parent: ProtocolFile | None = None
        self._parent_set = False

    # =========================================================================
    # Identity
    # =========================================================================

    @property
    def url(self) -> FileURL:
        """The URL identifying this file.  Do not mutate it."""
        return self._url

    @property
    def name(self) -> str:
        """Last path segment, ``""`` for a root."""
        return self._url.filename or ""

    @property
    def extension(self) -> str | None:
        return get_extension(self.name)

    @property
    def path(self) -> str:
        return self._url.path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProtocolFile):
            return NotImplemented
        return self._url == other._url

    def __hash__(self) -> int:
        return hash(self._url)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._url!r})"

    def __str__(self) -> str:
        return str(self._url)

    # =========================================================================
    # Capabilities
    # =========================================================================

    @classmethod
    def is_supported(cls, operation: FileOperation) -> bool:
        """Check if *operation* is implemented, without performing it."""
        method = getattr(cls, OPERATION_METHODS[operation])
        return not hasattr(method, UNSUPPORTED_MARKER)

    @classmethod
    def supported_operations(cls) -> set[FileOperation]:
        return {op for op in FileOperation if cls.is_supported(op)}

    # =========================================================================
    # Lazy resolution
    # =========================================================================

    @property
    def resolution_state(self) -> ResolutionState:
        return self._state

    def _resolve(self) -> None:  # noqa: B027
        """Populate ``self._attributes``.  No-op by default.

        Raise :class:`TransportError` on failure: the failure is logged and
        cached.  Any other exception propagates to the caller that triggered
        resolution, and is cached as a failure as well.
        """

    def _ensure_resolved(self, always: bool = False) -> None:
        """Run :meth:`_resolve` once, if this file resolves on demand (or *always*)."""
        if self._state.is_done or not (always or self._resolve_on_demand):
            return
        with self._resolve_lock:
            if self._state.is_done:
                return
            self._state = ResolutionState.RESOLVING
            succeeded = False
            try:
                self._resolve()
                succeeded = True
            except TransportError:
                logger.info("Failed to resolve %s", self._url, exc_info=True)
            finally:
                self._state = ResolutionState.RESOLVED if succeeded else ResolutionState.FAILED

    # =========================================================================
    # Attributes
    # =========================================================================

    def exists(self) -> bool:
        self._ensure_resolved(always=True)
        return self._attributes.exists

    def is_directory(self) -> bool:
        self._ensure_resolved()
        return self._attributes.is_directory

    def get_size(self) -> int:
        """Size in bytes, ``-1`` if unknown."""
        self._ensure_resolved()
        return self._attributes.size

    def get_last_modified(self) -> datetime:
        self._ensure_resolved()
        return self._attributes.last_modified

    def get_permissions(self) -> FilePermissions:
        self._ensure_resolved()
        return self._attributes.permissions

    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    def is_symlink(self) -> bool:
        return self._link_target() is not None

    def is_browsable(self) -> bool:
        """True if this file has children that can be listed."""
        return self.is_directory()

    def is_root(self) -> bool:
        return self._url.parent is None

    # =========================================================================
    # Navigation
    # =========================================================================

    def _create(self, url: FileURL) -> ProtocolFile:
        """Instantiate the file for a related URL (parent, child)."""
        return url.registry.create_file(url)

    def get_parent(self) -> ProtocolFile | None:
        if not self._parent_set:
            parent_url = self._url.parent
            self._parent = None if parent_url is None else self._create(parent_url)
            self._parent_set = True
        return self._parent

    def set_parent(self, parent: ProtocolFile | None) -> None:
        self._parent = parent
        self._parent_set = True

    def get_child(self, name: str) -> ProtocolFile:
        """Return the file named *name* inside this one.  No I/O is performed."""
        separator = self._url.path_separator
        child_url = self._url.copy()
        base = self._url.path if self._url.path.endswith(separator) else self._url.path + separator
        child_url.path = base + name
        child_url.query = None
        child = self._create(child_url)
        child.set_parent(self)
        return child

    def _link_target(self) -> ProtocolFile | None:
        """The file this one links to, ``None`` if it is not a link."""
        return None

    def canonical(self) -> ProtocolFile:
        """Follow links to the file they ultimately designate.

        Raises:
            CyclicReferenceError: a link chain revisits a file.
        """
        seen = {self._url.key()}
        current: ProtocolFile = self
        target = current._link_target()
        while target is not None:
            key = target.url.key()
            if key in seen:
                raise CyclicReferenceError(target.url)
            seen.add(key)
            current = target
            target = current._link_target()
        return current

    def list(self, file_filter: FileFilter | None = None) -> list[ProtocolFile]:
        """List children, keeping only those matched by *file_filter*."""
        children = self.ls()
        if file_filter is None:
            return children
        return file_filter.filter(children)

    # =========================================================================
    # Operations (unsupported unless overridden)
    # =========================================================================

    @unsupported(FileOperation.LIST_CHILDREN)
    def ls(self) -> list[ProtocolFile]:
        """Return this directory's children."""
        ...

    @unsupported(FileOperation.READ_FILE)
    def open_read(self, offset: int = 0) -> BinaryIO:
        """Open a byte stream starting at *offset*, without reading the bytes before it."""
        ...

    @unsupported(FileOperation.WRITE_FILE)
    def open_write(self) -> BinaryIO: ...

    @unsupported(FileOperation.APPEND_FILE)
    def open_append(self) -> BinaryIO: ...

    @unsupported(FileOperation.RANDOM_READ_FILE)
    def open_random_read(self) -> BinaryIO:
        """Open a seekable byte stream."""
        ...

    @unsupported(FileOperation.RANDOM_WRITE_FILE)
    def open_random_write(self) -> BinaryIO: ...

    @unsupported(FileOperation.CREATE_DIRECTORY)
    def mkdir(self) -> None: ...

    @unsupported(FileOperation.DELETE)
    def delete(self) -> None: ...

    @unsupported(FileOperation.RENAME)
    def rename_to(self, dest: ProtocolFile) -> None: ...

    @unsupported(FileOperation.CHANGE_DATE)
    def change_date(self, last_modified: datetime) -> None: ...

    @unsupported(FileOperation.CHANGE_PERMISSION)
    def change_permission(
        self, access: PermissionAccess, permission: PermissionType, enabled: bool
    ) -> None: ...

    @unsupported(FileOperation.GET_FREE_SPACE)
    def get_free_space(self) -> int: ...

    @unsupported(FileOperation.GET_TOTAL_SPACE)
    def get_total_space(self) -> int: ...

    @unsupported(FileOperation.COPY_REMOTELY)
    def copy_remotely_to(self, dest: ProtocolFile) -> None: ...
