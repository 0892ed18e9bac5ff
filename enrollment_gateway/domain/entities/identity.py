"""Authenticated caller."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """The caller's identifier and bearer credential."""

    id: str
    credential: str

    def __repr__(self) -> str:
        return f"CurrentUser(id={self.id!r})"
