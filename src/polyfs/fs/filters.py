"""File filters: composable predicates over :class:`ProtocolFile` objects.

Every filter answers :meth:`FileFilter.accept` for one file.  ``match`` is
``accept`` unless the filter is inverted, in which case it is ``reject``.
Composite filters combine the ``match`` results of their children, so
inverting a composite negates the whole expression::

    hidden_or_dir = AttributeFileFilter(FileAttribute.HIDDEN) | AttributeFileFilter(
        FileAttribute.DIRECTORY
    )
    visible_files = ~hidden_or_dir
    children = directory.list(visible_files)
"""

from __future__ import annotations

import copy
import fnmatch
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, MutableSequence, MutableSet
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .permissions import PermissionAccess, PermissionType
    from .protocol import ProtocolFile
    from .types import FileOperation


# ------------------------------------------------------------------
# Base
# ------------------------------------------------------------------


class FileFilter(ABC):
    """A predicate on files, with an inversion flag.

    Subclasses implement :meth:`accept`; everything else derives from it.
    """

    def __init__(self, inverted: bool = False) -> None:
        self.inverted = inverted

    @abstractmethod
    def accept(self, file: ProtocolFile) -> bool:
        """Return True if *file* satisfies this filter, ignoring inversion."""
        ...

    def reject(self, file: ProtocolFile) -> bool:
        return not self.accept(file)

    def match(self, file: ProtocolFile) -> bool:
        """Return :meth:`accept`, or :meth:`reject` if this filter is inverted."""
        return self.reject(file) if self.inverted else self.accept(file)

    def filter(self, files: Iterable[ProtocolFile]):
        """Keep only the files that :meth:`match`, in their original order.

        Mutable sequences and sets are filtered in place and returned.  Any
        other iterable is left untouched and a new list is returned.
        """
        if isinstance(files, MutableSequence):
            for i in range(len(files) - 1, -1, -1):
                if not self.match(files[i]):
                    del files[i]
            return files
        if isinstance(files, MutableSet):
            for file in [f for f in files if not self.match(f)]:
                files.discard(file)
            return files
        return [f for f in files if self.match(f)]

    def match_all(self, files: Iterable[ProtocolFile]) -> bool:
        return all(self.match(f) for f in files)

    def accept_all(self, files: Iterable[ProtocolFile]) -> bool:
        return all(self.accept(f) for f in files)

    def reject_all(self, files: Iterable[ProtocolFile]) -> bool:
        return all(self.reject(f) for f in files)

    def __and__(self, other: FileFilter) -> AndFileFilter:
        return AndFileFilter(self, other)

    def __or__(self, other: FileFilter) -> OrFileFilter:
        return OrFileFilter(self, other)

    def __invert__(self) -> FileFilter:
        """Return a shallow copy of this filter with the inversion flag flipped."""
        inverted = copy.copy(self)
        inverted.inverted = not self.inverted
        return inverted

    def __repr__(self) -> str:
        prefix = "~" if self.inverted else ""
        return f"{prefix}{type(self).__name__}()"


# ------------------------------------------------------------------
# Primitive filters
# ------------------------------------------------------------------


class PassThroughFileFilter(FileFilter):
    """Accepts every file."""

    def accept(self, file: ProtocolFile) -> bool:
        return True


class FileAttribute(Enum):
    """Boolean file properties :class:`AttributeFileFilter` can test."""

    DIRECTORY = "directory"
    FILE = "file"
    BROWSABLE = "browsable"
    HIDDEN = "hidden"
    SYMLINK = "symlink"
    ROOT = "root"
    EXISTS = "exists"


class AttributeFileFilter(FileFilter):
    """Accepts files for which *attribute* holds."""

    def __init__(self, attribute: FileAttribute, inverted: bool = False) -> None:
        super().__init__(inverted)
        self.attribute = attribute

    def accept(self, file: ProtocolFile) -> bool:
        attribute = self.attribute
        if attribute is FileAttribute.DIRECTORY:
            return file.is_directory()
        if attribute is FileAttribute.FILE:
            return not file.is_directory()
        if attribute is FileAttribute.BROWSABLE:
            return file.is_browsable()
        if attribute is FileAttribute.HIDDEN:
            return file.is_hidden()
        if attribute is FileAttribute.SYMLINK:
            return file.is_symlink()
        if attribute is FileAttribute.ROOT:
            return file.is_root()
        return file.exists()

    def __repr__(self) -> str:
        prefix = "~" if self.inverted else ""
        return f"{prefix}AttributeFileFilter({self.attribute.name})"


class FileOperationFilter(FileFilter):
    """Accepts files whose adapter supports *operation*.  Performs no I/O."""

    def __init__(self, operation: FileOperation, inverted: bool = False) -> None:
        super().__init__(inverted)
        self.operation = operation

    def accept(self, file: ProtocolFile) -> bool:
        return file.is_supported(self.operation)


class PermissionsFileFilter(FileFilter):
    """Accepts files granting *permission* to *access*.

    A bit the adapter does not support counts as not granted.
    """

    def __init__(
        self, access: PermissionAccess, permission: PermissionType, inverted: bool = False
    ) -> None:
        super().__init__(inverted)
        self.access = access
        self.permission = permission

    def accept(self, file: ProtocolFile) -> bool:
        return file.get_permissions().has(self.access, self.permission)


# ------------------------------------------------------------------
# Filename filters
# ------------------------------------------------------------------


class FilenameFilter(FileFilter):
    """Base for filters that only look at the file's name."""

    def __init__(self, case_sensitive: bool = True, inverted: bool = False) -> None:
        super().__init__(inverted)
        self.case_sensitive = case_sensitive

    def accept(self, file: ProtocolFile) -> bool:
        return self.accept_name(file.name)

    @abstractmethod
    def accept_name(self, name: str) -> bool: ...

    def _fold(self, text: str) -> str:
        return text if self.case_sensitive else text.lower()


class _StringFilenameFilter(FilenameFilter):
    def __init__(self, text: str, case_sensitive: bool = True, inverted: bool = False) -> None:
        super().__init__(case_sensitive, inverted)
        self.text = text

    def __repr__(self) -> str:
        prefix = "~" if self.inverted else ""
        return f"{prefix}{type(self).__name__}({self.text!r})"


class EqualsFilenameFilter(_StringFilenameFilter):
    def accept_name(self, name: str) -> bool:
        return self._fold(name) == self._fold(self.text)


class StartsWithFilenameFilter(_StringFilenameFilter):
    def accept_name(self, name: str) -> bool:
        return self._fold(name).startswith(self._fold(self.text))


class EndsWithFilenameFilter(_StringFilenameFilter):
    def accept_name(self, name: str) -> bool:
        return self._fold(name).endswith(self._fold(self.text))


class ContainsFilenameFilter(_StringFilenameFilter):
    def accept_name(self, name: str) -> bool:
        return self._fold(self.text) in self._fold(name)


class ExtensionFilenameFilter(FilenameFilter):
    """Accepts names ending in one of *extensions*.

    Extensions are given without the leading dot.  Case-insensitive unless
    told otherwise.
    """

    def __init__(
        self, extensions: Iterable[str], case_sensitive: bool = False, inverted: bool = False
    ) -> None:
        super().__init__(case_sensitive, inverted)
        self.extensions = tuple(ext.lstrip(".") for ext in extensions)

    def accept_name(self, name: str) -> bool:
        folded = self._fold(name)
        return any(folded.endswith("." + self._fold(ext)) for ext in self.extensions)


class RegexpFilenameFilter(FilenameFilter):
    """Accepts names in which *pattern* matches anywhere (``re.search``)."""

    def __init__(self, pattern: str, case_sensitive: bool = True, inverted: bool = False) -> None:
        super().__init__(case_sensitive, inverted)
        self.pattern = re.compile(pattern, 0 if case_sensitive else re.IGNORECASE)

    def accept_name(self, name: str) -> bool:
        return self.pattern.search(name) is not None


class GlobFilenameFilter(_StringFilenameFilter):
    """Accepts names matching a shell-style pattern (``*.txt``, ``log-?``)."""

    def accept_name(self, name: str) -> bool:
        return fnmatch.fnmatchcase(self._fold(name), self._fold(self.text))


# ------------------------------------------------------------------
# Composites
# ------------------------------------------------------------------


class ChainedFileFilter(FileFilter):
    """Base for filters combining the ``match`` results of child filters."""

    def __init__(self, *filters: FileFilter, inverted: bool = False) -> None:
        super().__init__(inverted)
        self._filters: list[FileFilter] = list(filters)

    @property
    def filters(self) -> list[FileFilter]:
        return list(self._filters)

    def add_filter(self, file_filter: FileFilter) -> None:
        self._filters.append(file_filter)

    def remove_filter(self, file_filter: FileFilter) -> None:
        """Remove *file_filter*.  Raises ``ValueError`` if it is not a child."""
        self._filters.remove(file_filter)

    def __len__(self) -> int:
        return len(self._filters)

    def __copy__(self) -> ChainedFileFilter:
        return type(self)(*self._filters, inverted=self.inverted)

    def __repr__(self) -> str:
        prefix = "~" if self.inverted else ""
        inner = ", ".join(repr(f) for f in self._filters)
        return f"{prefix}{type(self).__name__}({inner})"


class AndFileFilter(ChainedFileFilter):
    """Accepts a file if every child matches it.  With no children, accepts everything."""

    def accept(self, file: ProtocolFile) -> bool:
        return all(f.match(file) for f in self._filters)


class OrFileFilter(ChainedFileFilter):
    """Accepts a file if any child matches it.  With no children, rejects everything."""

    def accept(self, file: ProtocolFile) -> bool:
        return any(f.match(file) for f in self._filters)
