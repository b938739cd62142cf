"""Classified model - entities, operations and arguments of an analysis run.

The model has two groups keyed by entity name:

- ``Recognized``: declared data-model entities plus framework-level bracket
  entities such as ``[EntityManager]``
- ``Unknown``: pseudo-entities keyed by an unresolved callee type

Operations and arguments are owned by exactly one parent list. Moving them is
done by the reorganization primitives, never by sharing references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

OperationType = Literal["read", "write", "other", "transaction"]
OPERATION_TYPES: tuple[OperationType, ...] = ("read", "write", "other", "transaction")


class ResultGroup(str, Enum):
    """The two partitions of the classified model."""

    RECOGNIZED = "Recognized"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Location:
    """Source range of an item. Lines are 0-based."""

    file_path: str
    from_line: int
    from_column: int
    to_line: int
    to_column: int

    def sort_key(self) -> tuple[str, int, int, int, int]:
        return (self.file_path, self.from_line, self.from_column, self.to_line, self.to_column)


@dataclass
class Argument:
    """A filter key token of an operation (e.g. ``age__gte``)."""

    name: str
    note: str = ""
    is_custom: bool = False
    location: Location | None = None


@dataclass
class Operation:
    """An ORM call site, named ``receiver.method``."""

    name: str
    type: OperationType = "other"
    arguments: list[Argument] = field(default_factory=list)
    note: str = ""
    is_custom: bool = False
    location: Location | None = None


@dataclass
class Entity:
    """A data-model entity or a synthetic bracket-named bucket."""

    name: str
    operations: list[Operation] = field(default_factory=list)
    note: str = ""
    is_custom: bool = False
    location: Location | None = None

    @property
    def is_synthetic(self) -> bool:
        return is_synthetic_name(self.name)


@dataclass
class Repository:
    """Source-control coordinates of the analyzed code."""

    url: str
    hash: str


@dataclass
class ClassifiedModel:
    """Result of classifying ORM call sites into entities.

    Passed explicitly to the resolver, annotation and reorganization functions.
    """

    groups: dict[ResultGroup, dict[str, Entity]] = field(
        default_factory=lambda: {ResultGroup.RECOGNIZED: {}, ResultGroup.UNKNOWN: {}}
    )
    repository: Repository | None = None
    result_path: Path | None = None
    sources: set[str] = field(default_factory=set)

    @property
    def recognized(self) -> dict[str, Entity]:
        return self.groups[ResultGroup.RECOGNIZED]

    @property
    def unknown(self) -> dict[str, Entity]:
        return self.groups[ResultGroup.UNKNOWN]

    def group(self, group: ResultGroup | str) -> dict[str, Entity]:
        return self.groups[ResultGroup(group)]

    def find_group(self, entity_name: str) -> ResultGroup | None:
        """Group currently holding ``entity_name``, if any."""
        for group, entities in self.groups.items():
            if entity_name in entities:
                return group
        return None

    def clear(self) -> None:
        for entities in self.groups.values():
            entities.clear()
        self.sources.clear()

    def replace_with(self, other: ClassifiedModel) -> None:
        """Take over the content of ``other``, keeping this instance and its result path."""
        for group in ResultGroup:
            entities = self.groups[group]
            entities.clear()
            entities.update(other.groups[group])
        self.repository = other.repository
        self.sources = set(other.sources)

    def operation_count(self) -> int:
        return sum(
            len(e.operations) for entities in self.groups.values() for e in entities.values()
        )


def is_synthetic_name(name: str) -> bool:
    """Bracket-delimited names mark framework-level or overflow buckets."""
    return len(name) > 2 and name.startswith("[") and name.endswith("]")


def synthetic_name(name: str) -> str:
    return f"[{name}]"
