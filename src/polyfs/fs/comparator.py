"""FileComparator: ordering of files for sorted listings."""

from __future__ import annotations

import functools
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .protocol import ProtocolFile


class SortCriterion(Enum):
    NAME = "name"
    SIZE = "size"
    DATE = "date"
    EXTENSION = "extension"


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


class FileComparator:
    """Compares two files by one criterion.

    Ties on size, date and extension are broken by name.  With
    *directories_first*, directories sort before files whatever the
    direction; *ascending* only reverses the order within each group.

    Attributes:
        criterion: What files are compared by.
        ascending: False reverses the comparison result.
        case_sensitive: Compare names case-sensitively.
        directories_first: Group directories before files.
    """

    def __init__(
        self,
        criterion: SortCriterion = SortCriterion.NAME,
        ascending: bool = True,
        case_sensitive: bool = True,
        directories_first: bool = True,
    ) -> None:
        self.criterion = criterion
        self.ascending = ascending
        self.case_sensitive = case_sensitive
        self.directories_first = directories_first

    def compare(self, a: ProtocolFile, b: ProtocolFile) -> int:
        """Return a negative number, zero or a positive number as *a* sorts before, with or after *b*."""
        if self.directories_first:
            a_dir, b_dir = a.is_directory(), b.is_directory()
            if a_dir != b_dir:
                return -1 if a_dir else 1

        result = self._compare_criterion(a, b)
        if result == 0 and self.criterion is not SortCriterion.NAME:
            result = self._compare_names(a, b)
        return result if self.ascending else -result

    __call__ = compare

    def key(self) -> Callable[[ProtocolFile], object]:
        """Return a key function for :func:`sorted` and :meth:`list.sort`."""
        return functools.cmp_to_key(self.compare)

    def sort(self, files: Iterable[ProtocolFile]) -> list[ProtocolFile]:
        """Sort *files* stably.  A list is sorted in place and returned."""
        if isinstance(files, list):
            files.sort(key=self.key())
            return files
        return sorted(files, key=self.key())

    def _compare_criterion(self, a: ProtocolFile, b: ProtocolFile) -> int:
        criterion = self.criterion
        if criterion is SortCriterion.SIZE:
            return _cmp(max(a.get_size(), 0), max(b.get_size(), 0))
        if criterion is SortCriterion.DATE:
            return _cmp(a.get_last_modified(), b.get_last_modified())
        if criterion is SortCriterion.EXTENSION:
            return _cmp((a.extension or "").lower(), (b.extension or "").lower())
        return self._compare_names(a, b)

    def _compare_names(self, a: ProtocolFile, b: ProtocolFile) -> int:
        if self.case_sensitive:
            return _cmp(a.name, b.name)
        return _cmp(a.name.lower(), b.name.lower())

    def __repr__(self) -> str:
        return (
            f"FileComparator({self.criterion.name}, ascending={self.ascending}, "
            f"case_sensitive={self.case_sensitive}, directories_first={self.directories_first})"
        )
