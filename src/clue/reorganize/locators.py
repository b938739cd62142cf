"""Locators - find operations and arguments by name and source range.

Items are never matched by identity since the model may have been reloaded
from disk between the moment a locator was taken and the moment it is used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from clue.model.models import Location


class Locatable(Protocol):
    name: str
    location: Location | None


@dataclass(frozen=True, slots=True)
class Locator:
    """Structural address of an operation or argument.

    ``parent_name`` is the display name of the owner at the time the locator
    was taken. It is informative only and does not take part in matching.
    """

    name: str
    parent_name: str = ""
    file_path: str | None = None
    from_line: int | None = None
    from_column: int | None = None
    to_line: int | None = None
    to_column: int | None = None

    @classmethod
    def of(cls, item: Locatable, parent_name: str = "") -> Locator:
        location = item.location
        if location is None:
            return cls(name=item.name, parent_name=parent_name)
        return cls(
            name=item.name,
            parent_name=parent_name,
            file_path=location.file_path,
            from_line=location.from_line,
            from_column=location.from_column,
            to_line=location.to_line,
            to_column=location.to_column,
        )

    @property
    def range(self) -> tuple[str | None, int | None, int | None, int | None, int | None]:
        return (self.file_path, self.from_line, self.from_column, self.to_line, self.to_column)

    def matches(self, item: Locatable) -> bool:
        """Name and all five location fields are equal."""
        if item.name != self.name:
            return False
        location = item.location
        if location is None:
            return self.range == (None, None, None, None, None)
        return self.range == location.sort_key()
