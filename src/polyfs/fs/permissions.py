"""Permission bits, with a mask of the bits an adapter actually supports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PermissionAccess(int, Enum):
    """Who a permission bit applies to.  Values are the bit shift of each triplet."""

    USER = 6
    GROUP = 3
    OTHER = 0


class PermissionType(int, Enum):
    """What a permission bit allows.  Values are the bit within a triplet."""

    READ = 4
    WRITE = 2
    EXECUTE = 1


_SYMBOLS = {PermissionType.READ: "r", PermissionType.WRITE: "w", PermissionType.EXECUTE: "x"}


def permission_bit(access: PermissionAccess, permission: PermissionType) -> int:
    """Return the octal bit for *permission* granted to *access*."""
    return permission.value << access.value


@dataclass(frozen=True, slots=True)
class FilePermissions:
    """Unix-style permission bits.

    Attributes:
        value: Permission bits, e.g. ``0o644``.
        mask: Bits this value is meaningful for.  A bit outside the mask is
            unknown rather than unset.
    """

    value: int = 0
    mask: int = 0o777

    def has(self, access: PermissionAccess, permission: PermissionType) -> bool:
        bit = permission_bit(access, permission)
        return bool(self.value & self.mask & bit)

    def supports(self, access: PermissionAccess, permission: PermissionType) -> bool:
        return bool(self.mask & permission_bit(access, permission))

    def to_string(self) -> str:
        """Render as ``rwxr-x---``; unsupported bits render as ``-``."""
        chars = []
        for access in PermissionAccess:
            for permission in PermissionType:
                chars.append(_SYMBOLS[permission] if self.has(access, permission) else "-")
        return "".join(chars)


READ_ONLY_USER = FilePermissions(value=0o400, mask=0o700)
"""``r--------``: readable by the user; group and other bits unsupported."""

EMPTY_PERMISSIONS = FilePermissions(value=0, mask=0)
