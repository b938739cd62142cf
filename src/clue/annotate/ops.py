"""Annotation operations - auto-tag, summarize and clear.

Tags are written into notes. A plain ``tag`` was added by a user and is never
touched; ``tag(a)`` is owned here and is added, updated or removed to match
the current model. Running any operation twice on an unchanged model leaves
every note as it was after the first run.

When a manual tag no longer holds, a diagnostic line is returned instead of
editing it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from clue.annotate.cda import is_cda_tag, plan_entity
from clue.annotate.rules import NON_EQ_LOOKUPS, NON_TRIVIAL_LOOKUPS, is_full_scan, uses_lookup
from clue.core.errors import AnnotationError
from clue.core.logging import get_logger
from clue.model.models import ClassifiedModel, Entity, Operation
from clue.model.notes import (
    CDA_TRAN,
    FULL_SCAN,
    NON_EQ,
    NON_TRIVIAL,
    has_manual_tag,
    has_tag,
    remove_auto_family,
    replace_auto_tag,
    set_auto_tag,
    tokens,
)

log = get_logger("annotate")

SUPPORTED_AUTO_ANNOTATE_TAGS: tuple[str, ...] = (FULL_SCAN, CDA_TRAN, NON_EQ, NON_TRIVIAL)

# Tags computed per operation and summarized onto their entity
OPERATION_LEVEL_TAGS: tuple[str, ...] = (CDA_TRAN, NON_EQ, NON_TRIVIAL)

_LOOKUP_SETS: dict[str, frozenset[str]] = {
    NON_EQ: NON_EQ_LOOKUPS,
    NON_TRIVIAL: NON_TRIVIAL_LOOKUPS,
}


def double_check_message(tag: str, owner: str) -> str:
    return f'Double-check tag "{tag}" that was manually added for {owner}'


def _owner(entity: Entity, operation: Operation | None = None) -> str:
    if operation is None:
        return entity.name
    return f"{entity.name}/{operation.name}"


# =============================================================================
# Rules
# =============================================================================


def annotate_full_scan(model: ClassifiedModel, diagnostics: list[str]) -> None:
    """Tag entities having at least one unfiltered fetch."""
    for entity in model.recognized.values():
        condition = any(is_full_scan(op) for op in entity.operations)
        if has_manual_tag(entity.note, FULL_SCAN):
            if not condition:
                diagnostics.append(double_check_message(FULL_SCAN, _owner(entity)))
            continue
        entity.note = set_auto_tag(entity.note, FULL_SCAN, condition)


def annotate_lookups(model: ClassifiedModel, tag: str, diagnostics: list[str]) -> None:
    """Tag operations whose arguments use a lookup from the set named by ``tag``."""
    lookups = _LOOKUP_SETS[tag]
    for entity in model.recognized.values():
        for operation in entity.operations:
            condition = uses_lookup(operation, lookups)
            if has_manual_tag(operation.note, tag):
                if not condition:
                    diagnostics.append(double_check_message(tag, _owner(entity, operation)))
                continue
            operation.note = set_auto_tag(operation.note, tag, condition)


def annotate_cda(model: ClassifiedModel, diagnostics: list[str]) -> None:
    """Tag operations on or off the best column-set path of their entity."""
    for entity in model.recognized.values():
        plan = plan_entity(entity)
        log.debug("cda_plan", entity=entity.name, value=plan.value, path_len=len(plan.path))
        for operation, tag in zip(entity.operations, plan.assignments, strict=True):
            manual = [t for t in tokens(operation.note) if is_cda_tag(t)]
            if manual:
                operation.note = remove_auto_family(operation.note, is_cda_tag)
                if tag not in manual:
                    diagnostics.append(double_check_message(manual[0], _owner(entity, operation)))
                continue
            operation.note = replace_auto_tag(operation.note, is_cda_tag, tag)


_RULES: dict[str, Callable[[ClassifiedModel, list[str]], None]] = {
    FULL_SCAN: annotate_full_scan,
    CDA_TRAN: annotate_cda,
    NON_EQ: lambda model, diagnostics: annotate_lookups(model, NON_EQ, diagnostics),
    NON_TRIVIAL: lambda model, diagnostics: annotate_lookups(model, NON_TRIVIAL, diagnostics),
}


# =============================================================================
# Public operations
# =============================================================================


def summarize_entity_tags(
    model: ClassifiedModel, tags: Iterable[str] = OPERATION_LEVEL_TAGS
) -> list[str]:
    """Entity carries ``T(a)`` iff one of its operations carries ``T`` in either form.

    Returns double-check lines for manual entity tags no operation supports.
    """
    tags = tuple(tags)
    diagnostics: list[str] = []
    for entity in model.recognized.values():
        for tag in tags:
            present = any(has_tag(op.note, tag) for op in entity.operations)
            if has_manual_tag(entity.note, tag) and not present:
                diagnostics.append(double_check_message(tag, _owner(entity)))
            entity.note = set_auto_tag(entity.note, tag, present)
    return diagnostics


def auto_annotate(
    model: ClassifiedModel, tag: str, *, double_check: bool = True
) -> list[str]:
    """Apply one auto-annotation rule to the Recognized group.

    Args:
        model: Model to annotate in place.
        tag: One of SUPPORTED_AUTO_ANNOTATE_TAGS.
        double_check: Report manual tags whose condition no longer holds.

    Returns:
        Diagnostic lines, empty when ``double_check`` is off.

    Raises:
        AnnotationError: ``tag`` is not supported. The model is not changed.
    """
    rule = _RULES.get(tag)
    if rule is None:
        raise AnnotationError.unsupported_tag(tag, list(SUPPORTED_AUTO_ANNOTATE_TAGS))

    diagnostics: list[str] = []
    rule(model, diagnostics)
    if tag in OPERATION_LEVEL_TAGS:
        diagnostics.extend(summarize_entity_tags(model, (tag,)))

    if not double_check:
        diagnostics = []
    for line in diagnostics:
        log.info("double_check", tag=tag, message=line)
    log.info("auto_annotate_done", tag=tag, diagnostics=len(diagnostics))
    return diagnostics


def auto_annotate_all(model: ClassifiedModel, *, double_check: bool = True) -> list[str]:
    """Run every supported rule, then the summary step.

    The final summary repeats work already reported per tag, so its lines are
    not returned again.
    """
    diagnostics: list[str] = []
    for tag in SUPPORTED_AUTO_ANNOTATE_TAGS:
        diagnostics.extend(auto_annotate(model, tag, double_check=double_check))
    summarize_entity_tags(model)
    return diagnostics


def clear_auto_annotations(model: ClassifiedModel, tag: str | None = None) -> int:
    """Remove owned tags from every entity, operation and argument.

    Args:
        model: Model to edit in place.
        tag: Restrict to one supported tag. ``cda-tran`` also clears the
            ``cda[n/m](a)`` path tags.

    Returns:
        Number of notes changed.

    Raises:
        AnnotationError: ``tag`` is not supported.
    """
    if tag is not None and tag not in SUPPORTED_AUTO_ANNOTATE_TAGS:
        raise AnnotationError.unsupported_tag(tag, list(SUPPORTED_AUTO_ANNOTATE_TAGS))

    def family(base: str) -> bool:
        if tag is None:
            return base in SUPPORTED_AUTO_ANNOTATE_TAGS or is_cda_tag(base)
        if tag == CDA_TRAN:
            return is_cda_tag(base)
        return base == tag

    changed = 0
    for entities in model.groups.values():
        for entity in entities.values():
            items: list[Entity | Operation] = [entity, *entity.operations]
            for item in items:
                cleared = remove_auto_family(item.note, family)
                if cleared != item.note:
                    item.note = cleared
                    changed += 1
            for operation in entity.operations:
                for argument in operation.arguments:
                    cleared = remove_auto_family(argument.note, family)
                    if cleared != argument.note:
                        argument.note = cleared
                        changed += 1

    log.info("auto_annotations_cleared", tag=tag or "all", notes=changed)
    return changed

