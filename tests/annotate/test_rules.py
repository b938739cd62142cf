"""Tests for lookup rules and the column-set forest."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from clue.annotate.cda import best_path, build_forest, is_cda_tag, path_tag, plan_entity
from clue.annotate.rules import (
    NON_EQ_LOOKUPS,
    NON_TRIVIAL_LOOKUPS,
    column_set,
    filter_column,
    is_full_scan,
    lookup_suffix,
    uses_lookup,
)
from clue.model.models import Argument, Entity, Operation


class TestLookups:
    @pytest.mark.parametrize(
        ("name", "suffix"),
        [("age__gte", "gte"), ("author__name__icontains", "icontains"), ("id", "id")],
    )
    def test_lookup_suffix(self, name: str, suffix: str) -> None:
        assert lookup_suffix(name) == suffix

    @pytest.mark.parametrize(
        ("name", "column"),
        [
            ("age", "age"),
            ("age__gte", "age"),
            ("author__name__icontains", None),
            ("__gte", None),
        ],
    )
    def test_filter_column(self, name: str, column: str | None) -> None:
        """Only one- and two-segment names name a column."""
        assert filter_column(name) == column

    def test_non_trivial_excludes_comparisons(self) -> None:
        assert NON_EQ_LOOKUPS - NON_TRIVIAL_LOOKUPS == {"gt", "gte", "lt", "lte"}

    def test_uses_lookup(self, make_op: Callable[..., Operation]) -> None:
        operation = make_op("User.objects.filter", "name", "age__lte")

        assert uses_lookup(operation, NON_EQ_LOOKUPS)
        assert not uses_lookup(operation, NON_TRIVIAL_LOOKUPS)

    def test_column_set_deduplicates(self) -> None:
        arguments = [Argument("age__gte"), Argument("age__lte"), Argument("a__b__c")]

        assert column_set(arguments) == frozenset({"age"})

    def test_full_scan_suffix(self, make_op: Callable[..., Operation]) -> None:
        assert is_full_scan(make_op("User.objects.all"))
        assert not is_full_scan(make_op("User.objects.all_active"))


class TestForest:
    """Containment forest and best path."""

    def test_nested_sets_form_one_chain(self) -> None:
        abc, ab, a = frozenset("abc"), frozenset("ab"), frozenset("a")

        roots = build_forest({a: 1, abc: 1, ab: 1})

        assert [r.columns for r in roots] == [abc]
        assert roots[0].children[0].columns == ab
        assert roots[0].children[0].children[0].columns == a

    def test_inserted_under_most_specific_superset(self) -> None:
        """{a} goes under {a,b}, not directly under {a,b,c}."""
        abc, ab, ac, a = frozenset("abc"), frozenset("ab"), frozenset("ac"), frozenset("a")

        roots = build_forest({abc: 1, ab: 1, ac: 1, a: 1})

        (root,) = roots
        assert [c.columns for c in root.children] == [ab, ac]
        assert [c.columns for c in root.children[0].children] == [a]
        assert root.children[1].children == []

    def test_disjoint_sets_are_separate_roots(self) -> None:
        roots = build_forest({frozenset("a"): 2, frozenset("c"): 1})

        value, path = best_path(roots)

        assert len(roots) == 2
        assert value == 2
        assert [n.columns for n in path] == [frozenset("a")]

    def test_tie_keeps_first_candidate(self) -> None:
        """Equal weights keep the first root in sorted key order."""
        value, path = best_path(build_forest({frozenset("b"): 1, frozenset("a"): 1}))

        assert value == 1
        assert path[0].columns == frozenset("a")


class TestPlanEntity:
    def test_given_documented_example_when_planned_then_value_five(
        self, make_op: Callable[..., Operation]
    ) -> None:
        """{a,b}x3, {a}x2, {c}x1: best path {a,b} -> {a} with value 5."""
        # Given
        operations = (
            [make_op("E.filter", "a", "b") for _ in range(3)]
            + [make_op("E.get", "a") for _ in range(2)]
            + [make_op("E.filter", "c")]
        )
        entity = Entity(name="E", operations=operations)

        # When
        plan = plan_entity(entity)

        # Then
        assert plan.value == 5
        assert plan.path == [frozenset("ab"), frozenset("a")]
        assert plan.max_size == 2
        assert plan.assignments == ["cda[2/2]"] * 3 + ["cda[1/2]"] * 2 + ["cda-tran"]

    def test_operations_without_columns_are_transitive(
        self, make_op: Callable[..., Operation]
    ) -> None:
        entity = Entity(
            name="E",
            operations=[make_op("E.all"), make_op("E.get", "id"), make_op("E.get", "x__y__z")],
        )

        plan = plan_entity(entity)

        assert plan.assignments == ["cda-tran", "cda[1/1]", "cda-tran"]

    def test_empty_entity(self) -> None:
        plan = plan_entity(Entity(name="E"))

        assert (plan.value, plan.path, plan.assignments, plan.max_size) == (0, [], [], 0)


class TestCdaTags:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [("cda-tran", True), ("cda[1/2]", True), ("cda[1/2](a)", False), ("cda-dep", False)],
    )
    def test_is_cda_tag(self, tag: str, expected: bool) -> None:
        assert is_cda_tag(tag) is expected

    def test_path_tag(self) -> None:
        assert path_tag(1, 3) == "cda[1/3]"
