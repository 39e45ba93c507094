"""Value types: FileOperation, FileAttributes, ResolutionState."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from .permissions import FilePermissions


class FileOperation(str, Enum):
    """Operations a file adapter may or may not support."""

    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    APPEND_FILE = "append_file"
    RANDOM_READ_FILE = "random_read_file"
    RANDOM_WRITE_FILE = "random_write_file"
    LIST_CHILDREN = "list_children"
    CREATE_DIRECTORY = "create_directory"
    DELETE = "delete"
    RENAME = "rename"
    CHANGE_DATE = "change_date"
    CHANGE_PERMISSION = "change_permission"
    GET_FREE_SPACE = "get_free_space"
    GET_TOTAL_SPACE = "get_total_space"
    COPY_REMOTELY = "copy_remotely"


class ResolutionState(Enum):
    """Where a file stands in resolving its attributes.

    ``UNRESOLVED`` -> ``RESOLVING`` -> ``RESOLVED`` | ``FAILED``.  Both
    terminal states are final: resolution is attempted at most once.
    """

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"

    @property
    def is_done(self) -> bool:
        return self in (ResolutionState.RESOLVED, ResolutionState.FAILED)


@dataclass
class FileAttributes:
    """File/directory attributes.

    Hold best-effort defaults until the owning file has been resolved.
    """

    exists: bool = False
    is_directory: bool = False
    size: int = -1  # -1 = unknown
    last_modified: datetime = field(default_factory=lambda: datetime.now(UTC))
    permissions: FilePermissions = field(default_factory=FilePermissions)
