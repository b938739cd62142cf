"""Name/note filters for listing entities and operations."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from clue.model.models import Entity, Operation


def _matches(name: str, note: str, filters: Sequence[str]) -> bool:
    haystacks = (name.lower(), note.lower())
    return any(f.lower() in h for f in filters for h in haystacks)


def entity_includes(entity: Entity, filters: Sequence[str]) -> bool:
    """True if any filter is a case-insensitive substring of the entity name or note."""
    return _matches(entity.name, entity.note, filters)


def operation_includes(operation: Operation, filters: Sequence[str]) -> bool:
    return _matches(operation.name, operation.note, filters)


def filter_entities(
    entities: dict[str, Entity], filters: Sequence[str]
) -> Iterator[tuple[Entity, list[Operation]]]:
    """Yield entities that pass the filters, sorted by name, with their visible operations.

    An entity that matches shows all of its operations; otherwise only the
    matching operations are shown and entities with none are skipped.
    """
    for entity in sorted(entities.values(), key=lambda e: e.name):
        if not filters or entity_includes(entity, filters):
            yield entity, list(entity.operations)
            continue
        visible = [op for op in entity.operations if operation_includes(op, filters)]
        if visible:
            yield entity, visible
