"""Credentials: login/password pair carried by a FileURL."""

from __future__ import annotations

from dataclasses import dataclass, field

PASSWORD_MASK = "********"


@dataclass(frozen=True, slots=True)
class Credentials:
    """Immutable login/password pair.

    Equality (``==``) is exact on both fields. Use :meth:`equals` with
    ``case_sensitive=False`` for a case-insensitive comparison.

    Attributes:
        login: Login / user name. May contain any character.
        password: Password, ``""`` when none was given. Excluded from ``repr``.
    """

    login: str
    password: str = field(default="", repr=False)

    @property
    def is_empty(self) -> bool:
        """True when both login and password are empty."""
        return not self.login and not self.password

    @property
    def masked_password(self) -> str:
        """A fixed-width mask standing in for the password, ``""`` if there is none."""
        return PASSWORD_MASK if self.password else ""

    def equals(self, other: object, *, case_sensitive: bool = True) -> bool:
        """Compare with *other*, optionally ignoring case on both fields."""
        if not isinstance(other, Credentials):
            return False
        if case_sensitive:
            return self.login == other.login and self.password == other.password
        return (
            self.login.casefold() == other.login.casefold()
            and self.password.casefold() == other.password.casefold()
        )
