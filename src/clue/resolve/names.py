"""Entity name helpers: base names and naming-convention variants."""

from __future__ import annotations

import re
from collections.abc import Iterable

from clue.model.models import is_synthetic_name

# Base name -> qualified name, or None when several entities share the base name
BaseNameMap = dict[str, str | None]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def base_name(qualified_name: str) -> str:
    """Last path segment: ``app.models.User`` -> ``User``."""
    return qualified_name.rsplit(".", 1)[-1]


def build_base_name_map(entity_names: Iterable[str]) -> BaseNameMap:
    """Map each base name to its qualified name, marking shared base names ambiguous.

    Bracket-named synthetic entities are left out.
    """
    result: BaseNameMap = {}
    for name in entity_names:
        if is_synthetic_name(name):
            continue
        base = base_name(name)
        if base in result and result[base] != name:
            result[base] = None
        else:
            result[base] = name
    return result


def unambiguous(base_names: BaseNameMap) -> dict[str, str]:
    """Qualified name -> base name for entities whose base name is unique."""
    return {qualified: base for base, qualified in base_names.items() if qualified is not None}


def to_snake(name: str) -> str:
    """``BlogPost`` -> ``blog_post``."""
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def to_pascal(name: str) -> str:
    """``blog_post`` / ``blogPost`` -> ``BlogPost``."""
    parts = [p for p in re.split(r"[_\-\s]+", name) if p]
    return "".join(p[0].upper() + p[1:] for p in parts)


def pluralize(word: str) -> str:
    """English plural of a lowercase identifier word."""
    if not word:
        return word
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if word.endswith("y") and len(word) > 1 and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


def convention_variants(base: str) -> list[str]:
    """snake_case singular and plural of a base name, excluding the base itself.

    ``BlogPost`` -> ``["blog_post", "blog_posts"]``
    """
    snake = to_snake(base)
    variants = [snake, pluralize(snake)]
    return [v for v in dict.fromkeys(variants) if v != base]


def strip_suffix(name: str, suffixes: Iterable[str]) -> str | None:
    """Remove the first matching suffix, if what remains is non-empty."""
    for suffix in suffixes:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return None
