"""Column-set containment forest for the CDA-transitivity rule.

Every operation of an entity filters on a set of columns. Sets that nest
(``{a, b}`` covers ``{a}``) describe queries that can share one access path;
sets that do not nest indicate transitive filter dependencies.

Algorithm:
1. Derive each operation's column set. Empty sets fall in a "remaining"
   bucket.
2. Weigh each distinct non-empty set by the number of operations using it.
3. Insert the distinct sets, largest first, under the most specific node
   that is a strict superset (or at the root when none is).
4. Pick the root-to-leaf path with the largest total weight. Ties keep the
   first candidate in insertion order.

Operations whose set lies on the path are tagged ``cda[size/maxSize]``;
every other operation, including the remaining bucket, is tagged
``cda-tran``.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from clue.annotate.rules import column_set
from clue.model.models import Entity
from clue.model.notes import CDA_TRAN

PATH_TAG_PATTERN = re.compile(r"cda\[\d+/\d+\]")


def path_tag(size: int, max_size: int) -> str:
    return f"cda[{size}/{max_size}]"


def is_cda_tag(tag: str) -> bool:
    """True for ``cda-tran`` and ``cda[n/m]`` tags (without the auto suffix)."""
    return tag == CDA_TRAN or PATH_TAG_PATTERN.fullmatch(tag) is not None


def canonical_key(columns: Iterable[str]) -> str:
    return ",".join(sorted(columns))


@dataclass
class ColumnNode:
    columns: frozenset[str]
    weight: int
    children: list[ColumnNode] = field(default_factory=list)

    @property
    def key(self) -> str:
        return canonical_key(self.columns)


@dataclass
class CdaPlan:
    """Best path of one entity and the tag each operation should carry.

    ``assignments`` is parallel to the entity's operation list.
    """

    value: int
    path: list[frozenset[str]]
    assignments: list[str]

    @property
    def max_size(self) -> int:
        return len(self.path[0]) if self.path else 0


def build_forest(weights: dict[frozenset[str], int]) -> list[ColumnNode]:
    ordered = sorted(weights, key=lambda columns: (-len(columns), canonical_key(columns)))
    roots: list[ColumnNode] = []
    for columns in ordered:
        node = ColumnNode(columns=columns, weight=weights[columns])
        parent = _most_specific_superset(roots, columns)
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


def _most_specific_superset(
    nodes: list[ColumnNode], columns: frozenset[str]
) -> ColumnNode | None:
    best: ColumnNode | None = None
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        if not columns < node.columns:
            continue
        if best is None or len(node.columns) < len(best.columns):
            best = node
        stack.extend(reversed(node.children))
    return best


def best_path(nodes: list[ColumnNode]) -> tuple[int, list[ColumnNode]]:
    """Root-to-leaf path with the largest total weight, and that weight."""
    best_value = 0
    best: list[ColumnNode] = []
    for node in nodes:
        value, rest = best_path(node.children)
        value += node.weight
        if value > best_value:
            best_value, best = value, [node, *rest]
    return best_value, best


def plan_entity(entity: Entity) -> CdaPlan:
    sets = [column_set(operation.arguments) for operation in entity.operations]
    weights = Counter(columns for columns in sets if columns)
    value, nodes = best_path(build_forest(dict(weights)))
    path = [node.columns for node in nodes]
    on_path = set(path)
    max_size = len(path[0]) if path else 0
    assignments = [
        path_tag(len(columns), max_size) if columns in on_path else CDA_TRAN for columns in sets
    ]
    return CdaPlan(value=value, path=path, assignments=assignments)
