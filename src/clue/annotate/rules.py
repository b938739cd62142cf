"""Lookup rules over argument names.

Argument names are filter key tokens such as ``age__gte`` or
``author__name__icontains``. The segment after the last separator is the
lookup; the first segment is the filtered column.
"""

from __future__ import annotations

from collections.abc import Iterable

from clue.model.models import Argument, Operation

LOOKUP_SEPARATOR = "__"

# Operation names ending with these fetch rows without a filter
FULL_SCAN_SUFFIXES: tuple[str, ...] = (".all",)

NON_EQ_LOOKUPS: frozenset[str] = frozenset(
    {
        "contains",
        "icontains",
        "startswith",
        "istartswith",
        "endswith",
        "iendswith",
        "gt",
        "gte",
        "lt",
        "lte",
        "range",
        "regex",
        "iregex",
    }
)

# String-pattern and range lookups only
NON_TRIVIAL_LOOKUPS: frozenset[str] = NON_EQ_LOOKUPS - {"gt", "gte", "lt", "lte"}


def lookup_suffix(argument_name: str) -> str:
    """``age__gte`` -> ``gte``; a name without separator is its own suffix."""
    return argument_name.split(LOOKUP_SEPARATOR)[-1]


def filter_column(argument_name: str) -> str | None:
    """First segment of a one- or two-segment name, else None.

    Longer chains (``author__name__icontains``) traverse relations and do not
    name a column of the entity itself.
    """
    parts = argument_name.split(LOOKUP_SEPARATOR)
    if 0 < len(parts) <= 2 and parts[0]:
        return parts[0]
    return None


def column_set(arguments: Iterable[Argument]) -> frozenset[str]:
    columns = (filter_column(a.name) for a in arguments)
    return frozenset(c for c in columns if c is not None)


def uses_lookup(operation: Operation, lookups: frozenset[str]) -> bool:
    """True if any argument of ``operation`` ends with one of ``lookups``."""
    return any(lookup_suffix(a.name) in lookups for a in operation.arguments)


def is_full_scan(operation: Operation) -> bool:
    return operation.name.endswith(FULL_SCAN_SUFFIXES)
