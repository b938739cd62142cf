"""Statistics over the classified model.

Counts honor note markers: ``!read`` excludes an operation from the ``read``
count, ``@type(id)`` counts once per distinct id, ``@type`` counts once per
occurrence, and ``!entity`` excludes an entity from the entity count.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import uuid4

from clue.model.models import ClassifiedModel, Entity, Operation, ResultGroup
from clue.model.notes import TAGS, base_tags

_COUNTED_ANNOTATION = re.compile(r"@(\w+)(\(\w+\))?")


def group_operation_types(
    operations: Iterable[Operation],
    result: dict[str, set[str]] | None = None,
) -> dict[str, set[str]]:
    """Map operation type (or ``@type`` annotation) to a set of ids of that type.

    ``result`` is copied, not mutated, so totals can be accumulated across entities.
    """
    result = {key: set(ids) for key, ids in (result or {}).items()}

    def add_id(kind: str, ident: str | None = None) -> None:
        result.setdefault(kind, set()).add(ident or uuid4().hex)

    for operation in operations:
        if f"!{operation.type}" not in operation.note:
            add_id(operation.type)
        for match in _COUNTED_ANNOTATION.finditer(operation.note):
            ident = match.group(2)[1:-1] if match.group(2) else None
            add_id(match.group(1), ident)

    return result


def count_operation_types(operations: Iterable[Operation]) -> dict[str, int]:
    return {kind: len(ids) for kind, ids in group_operation_types(operations).items()}


def count_tags(entities: Iterable[Entity]) -> dict[str, int]:
    """Count entities and operations carrying each known tag, manual or automatic."""
    result: dict[str, int] = {}
    for entity in entities:
        for note in [entity.note, *(op.note for op in entity.operations)]:
            present = base_tags(note)
            for tag in TAGS:
                if tag in present:
                    result[tag] = result.get(tag, 0) + 1
    return result


def count_cda(entity: Entity) -> int:
    """Number of distinct argument-name combinations used by an entity's operations."""
    combos = {
        ",".join(sorted(arg.name for arg in op.arguments))
        for op in entity.operations
        if op.arguments
    }
    return len(combos)


@dataclass
class GroupStats:
    """Statistics for one result group."""

    group: ResultGroup
    entities: int = 0
    operation_types: dict[str, int] = field(default_factory=dict)
    tags: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "group": self.group.value,
            "entities": self.entities,
            "operation_types": dict(sorted(self.operation_types.items())),
            "tags": dict(sorted(self.tags.items())),
        }


def summarize(model: ClassifiedModel) -> list[GroupStats]:
    stats: list[GroupStats] = []
    for group in ResultGroup:
        entities = list(model.group(group).values())
        type_ids: dict[str, set[str]] = {}
        for entity in entities:
            type_ids = group_operation_types(entity.operations, type_ids)
        stats.append(
            GroupStats(
                group=group,
                entities=sum(
                    1 for e in entities if "!entity" not in e.note and not e.is_synthetic
                ),
                operation_types={kind: len(ids) for kind, ids in type_ids.items()},
                tags=count_tags(entities),
            )
        )
    return stats
