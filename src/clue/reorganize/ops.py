"""Reorganization operations - move, merge, add and remove model items.

Moves locate items structurally (see ``Locator``), transfer ownership by
appending to the new parent, and delete from the old parent afterwards in
descending index order so earlier deletions do not shift later indexes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from clue.core.errors import ModelError
from clue.core.logging import get_logger
from clue.model.models import (
    Argument,
    ClassifiedModel,
    Entity,
    Location,
    Operation,
    OperationType,
    ResultGroup,
    synthetic_name,
)
from clue.reorganize.locators import Locator

log = get_logger("reorganize")

# Unknown bucket receiving operations moved out of their entity by hand
MOVED_BUCKET = synthetic_name("moved")


@dataclass
class MoveResult:
    """Outcome of a bulk move. Skipped locators are not errors."""

    moved: int = 0
    same_parent: int = 0
    unmatched: list[Locator] = field(default_factory=list)


def _get_entity(model: ClassifiedModel, group: ResultGroup | str, name: str) -> Entity:
    entity = model.group(group).get(name)
    if entity is None:
        raise ModelError.entity_not_found(name, ResultGroup(group).value)
    return entity


# =============================================================================
# Moves
# =============================================================================


def move_operations(
    model: ClassifiedModel,
    source_group: ResultGroup | str,
    target: Entity,
    locators: Iterable[Locator],
) -> MoveResult:
    """Move located operations of ``source_group`` entities onto ``target``.

    Every entity of the source group is scanned for each locator. An
    operation already owned by ``target`` is left in place.
    """
    entities = model.group(source_group)
    result = MoveResult()
    removals: dict[str, list[int]] = {}

    for locator in locators:
        found = _find_operation(entities, locator, removals)
        if found is None:
            result.unmatched.append(locator)
            continue
        source, index = found
        if source is target:
            result.same_parent += 1
            continue
        target.operations.append(source.operations[index])
        removals.setdefault(source.name, []).append(index)
        result.moved += 1

    for name, indexes in removals.items():
        operations = entities[name].operations
        for index in sorted(indexes, reverse=True):
            del operations[index]

    log.info(
        "operations_moved",
        target=target.name,
        moved=result.moved,
        same_parent=result.same_parent,
        unmatched=len(result.unmatched),
    )
    return result


def _find_operation(
    entities: dict[str, Entity], locator: Locator, claimed: dict[str, list[int]]
) -> tuple[Entity, int] | None:
    for entity in entities.values():
        taken = claimed.get(entity.name, ())
        for index, operation in enumerate(entity.operations):
            if index not in taken and locator.matches(operation):
                return entity, index
    return None


def move_arguments(
    model: ClassifiedModel,
    source_group: ResultGroup | str,
    target: Operation,
    locators: Iterable[Locator],
) -> MoveResult:
    """Move located arguments of any operation in ``source_group`` onto ``target``."""
    entities = model.group(source_group)
    result = MoveResult()
    removals: dict[tuple[str, int], list[int]] = {}

    for locator in locators:
        found = _find_argument(entities, locator, removals)
        if found is None:
            result.unmatched.append(locator)
            continue
        owner, operation, index = found
        if operation is target:
            result.same_parent += 1
            continue
        target.arguments.append(operation.arguments[index])
        removals.setdefault(owner, []).append(index)
        result.moved += 1

    for (entity_name, operation_index), indexes in removals.items():
        arguments = entities[entity_name].operations[operation_index].arguments
        for index in sorted(indexes, reverse=True):
            del arguments[index]

    log.info(
        "arguments_moved",
        target=target.name,
        moved=result.moved,
        same_parent=result.same_parent,
        unmatched=len(result.unmatched),
    )
    return result


def _find_argument(
    entities: dict[str, Entity], locator: Locator, claimed: dict[tuple[str, int], list[int]]
) -> tuple[tuple[str, int], Operation, int] | None:
    for entity in entities.values():
        for operation_index, operation in enumerate(entity.operations):
            owner = (entity.name, operation_index)
            taken = claimed.get(owner, ())
            for index, argument in enumerate(operation.arguments):
                if index not in taken and locator.matches(argument):
                    return owner, operation, index
    return None


def move_operations_to_unknown(
    model: ClassifiedModel, source_group: ResultGroup | str, locators: Iterable[Locator]
) -> MoveResult:
    """Move operations into the Unknown ``[moved]`` bucket, created on demand."""
    bucket = model.unknown.get(MOVED_BUCKET)
    if bucket is None:
        bucket = model.unknown[MOVED_BUCKET] = Entity(name=MOVED_BUCKET, is_custom=True)
    return move_operations(model, source_group, bucket, locators)


def move_entity(
    model: ClassifiedModel,
    name: str,
    source_group: ResultGroup | str,
    target_group: ResultGroup | str,
) -> Entity:
    """Regroup an entity, keeping its operations."""
    source_group = ResultGroup(source_group)
    target_group = ResultGroup(target_group)
    entity = _get_entity(model, source_group, name)
    if source_group == target_group:
        return entity
    targets = model.group(target_group)
    if name in targets:
        raise ModelError.duplicate_entity(name, target_group.value)
    del model.group(source_group)[name]
    targets[name] = entity
    log.info("entity_moved", entity=name, source=source_group.value, target=target_group.value)
    return entity


def merge_entities(
    model: ClassifiedModel, group: ResultGroup | str, source_name: str, target_name: str
) -> int:
    """Move every operation of ``source_name`` onto ``target_name``.

    The emptied source is deleted when it is custom. Returns the number of
    operations moved.
    """
    source = _get_entity(model, group, source_name)
    target = _get_entity(model, group, target_name)
    if source is target:
        return 0
    moved = len(source.operations)
    target.operations.extend(source.operations)
    source.operations = []
    if source.is_custom:
        del model.group(group)[source_name]
    log.info("entities_merged", source=source_name, target=target_name, operations=moved)
    return moved


# =============================================================================
# Custom items
# =============================================================================


def add_entity(
    model: ClassifiedModel,
    name: str,
    group: ResultGroup | str = ResultGroup.RECOGNIZED,
    location: Location | None = None,
) -> Entity:
    existing = model.find_group(name)
    if existing is not None:
        raise ModelError.duplicate_entity(name, existing.value)
    entity = Entity(name=name, is_custom=True, location=location)
    model.group(group)[name] = entity
    return entity


def add_operation(
    model: ClassifiedModel,
    group: ResultGroup | str,
    entity_name: str,
    name: str,
    type: OperationType = "other",
    location: Location | None = None,
) -> Operation:
    entity = _get_entity(model, group, entity_name)
    operation = Operation(name=name, type=type, is_custom=True, location=location)
    entity.operations.append(operation)
    return operation


def add_argument(
    model: ClassifiedModel,
    group: ResultGroup | str,
    entity_name: str,
    operation_index: int,
    name: str,
    location: Location | None = None,
) -> Argument:
    operation = _get_operation(_get_entity(model, group, entity_name), operation_index)
    argument = Argument(name=name, is_custom=True, location=location)
    operation.arguments.append(argument)
    return argument


def remove_entity(model: ClassifiedModel, group: ResultGroup | str, name: str) -> Entity:
    entity = _get_entity(model, group, name)
    if not entity.is_custom:
        raise ModelError.not_custom("entity", name)
    del model.group(group)[name]
    return entity


def remove_operation(
    model: ClassifiedModel, group: ResultGroup | str, entity_name: str, index: int
) -> Operation:
    entity = _get_entity(model, group, entity_name)
    operation = _get_operation(entity, index)
    if not operation.is_custom:
        raise ModelError.not_custom("operation", operation.name)
    del entity.operations[index]
    return operation


def remove_argument(
    model: ClassifiedModel,
    group: ResultGroup | str,
    entity_name: str,
    operation_index: int,
    index: int,
) -> Argument:
    operation = _get_operation(_get_entity(model, group, entity_name), operation_index)
    if not 0 <= index < len(operation.arguments):
        raise ModelError.item_not_found("argument", operation.name, index)
    argument = operation.arguments[index]
    if not argument.is_custom:
        raise ModelError.not_custom("argument", argument.name)
    del operation.arguments[index]
    return argument


def _get_operation(entity: Entity, index: int) -> Operation:
    if not 0 <= index < len(entity.operations):
        raise ModelError.item_not_found("operation", entity.name, index)
    return entity.operations[index]
