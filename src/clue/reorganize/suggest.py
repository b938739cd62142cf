"""Aggressive recognition - propose Unknown operations for Recognized entities.

An Unknown operation is proposed for an entity when its name equals, or is
dot-prefixed by, the entity's base name (``User.objects.filter``) or a
snake_case variant of it (``user.save``, ``blog_posts.all``). Entities whose
base name is shared by another entity are left out.

Suggestions never change the model. ``apply_steps`` feeds confirmed steps to
``move_operations``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Literal

from clue.core.logging import get_logger
from clue.model.models import ClassifiedModel, Operation, ResultGroup
from clue.reorganize.locators import Locator
from clue.reorganize.ops import move_operations
from clue.resolve.names import build_base_name_map, convention_variants, unambiguous

log = get_logger("reorganize.suggest")

StepKind = Literal["exact", "convention"]


@dataclass
class RecognitionCandidate:
    source: str
    operation: Operation


@dataclass
class RecognitionStep:
    """Operations proposed for one target entity, from one name bucket."""

    target: str
    kind: StepKind
    names: list[str]
    candidates: list[RecognitionCandidate] = field(default_factory=list)

    def locators(self) -> list[Locator]:
        return [Locator.of(c.operation, c.source) for c in self.candidates]

    def describe(self) -> str:
        return (
            f"{len(self.candidates)} operation(s) named after {', '.join(self.names)} "
            f"-> {self.target}"
        )


def name_matches(operation_name: str, names: Iterable[str]) -> bool:
    return any(operation_name == n or operation_name.startswith(n + ".") for n in names)


def suggest_recognition(model: ClassifiedModel) -> list[RecognitionStep]:
    """One step per target entity and non-empty bucket, exact bucket first."""
    bases = unambiguous(build_base_name_map(model.recognized))
    steps: list[RecognitionStep] = []

    for qualified in model.recognized:
        base = bases.get(qualified)
        if base is None:
            continue
        exact = RecognitionStep(target=qualified, kind="exact", names=[base])
        convention = RecognitionStep(
            target=qualified, kind="convention", names=convention_variants(base)
        )
        for source, entity in model.unknown.items():
            for operation in entity.operations:
                if name_matches(operation.name, exact.names):
                    exact.candidates.append(RecognitionCandidate(source, operation))
                elif name_matches(operation.name, convention.names):
                    convention.candidates.append(RecognitionCandidate(source, operation))
        steps.extend(step for step in (exact, convention) if step.candidates)

    log.debug("recognition_suggested", steps=len(steps))
    return steps


def apply_steps(
    model: ClassifiedModel,
    steps: Iterable[RecognitionStep],
    confirm: Callable[[RecognitionStep], bool] | None = None,
) -> int:
    """Move the candidates of every confirmed step. Returns operations moved.

    Candidates already moved by an earlier step are skipped.
    """
    moved = 0
    for step in steps:
        if confirm is not None and not confirm(step):
            continue
        target = model.recognized.get(step.target)
        if target is None:
            continue
        moved += move_operations(model, ResultGroup.UNKNOWN, target, step.locators()).moved
    return moved
