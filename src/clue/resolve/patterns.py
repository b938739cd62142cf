"""Framework profiles: the type spellings the resolver understands.

Each profile is data only. The resolver walks the tables in a fixed order,
so adding a framework means adding a profile, not a branch.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# A pattern and the function turning its match into candidate entity names
TypePattern = tuple[re.Pattern[str], Callable[[re.Match[str]], list[str]]]


def single_name(match: re.Match[str]) -> list[str]:
    """``Repository<Foo>`` -> ``["Foo"]``."""
    return [match.group(1).strip()]


def name_list(match: re.Match[str]) -> list[str]:
    """``_QuerySet[Foo, Bar]`` -> ``["Foo", "Bar"]``."""
    return [part.strip() for part in match.group(1).split(",") if part.strip()]


def extract_names(patterns: tuple[TypePattern, ...], type_name: str) -> list[str]:
    """Names extracted by the first pattern that matches ``type_name``."""
    for pattern, extractor in patterns:
        match = pattern.search(type_name)
        if match:
            return extractor(match)
    return []


@dataclass(frozen=True)
class FrameworkProfile:
    """Type spellings of one ORM framework.

    Attributes:
        name: Profile identifier (also the extractor backend name).
        global_types: Exact type spelling -> bracket entity for framework-wide APIs.
        containers: Generic containers holding a single model name.
        multi_containers: Generic containers holding a list of model names.
        accessor_suffix: Full match on a type's last segment; group ``base``
            is the model base name (``FooManager`` -> ``Foo``).
        placeholder_types: Spellings meaning "type unknown" to the extractor.
        receiver_suffixes: Suffixes stripped from a receiver identifier to
            guess a model name (``userRepository`` -> ``user``).
    """

    name: str
    global_types: Mapping[str, str] = field(default_factory=dict)
    containers: tuple[TypePattern, ...] = ()
    multi_containers: tuple[TypePattern, ...] = ()
    accessor_suffix: re.Pattern[str] | None = None
    placeholder_types: frozenset[str] = frozenset()
    receiver_suffixes: tuple[str, ...] = ()

    @property
    def synthetic_entities(self) -> tuple[str, ...]:
        """Bracket entities seeded into an empty Recognized group, in table order."""
        return tuple(dict.fromkeys(self.global_types.values()))


_PLACEHOLDERS = frozenset(
    {"", "any", "Any", "typing.Any", "unknown", "Unknown", "object", "builtins.object"}
)

DJANGO = FrameworkProfile(
    name="django",
    global_types=MappingProxyType(
        {
            "django.db.transaction.Atomic": "[django.db.transaction.atomic]",
            "django.db.transaction.atomic": "[django.db.transaction.atomic]",
            "django.db.backends.utils.CursorWrapper": "[django.db.connection]",
            "django.db.backends.utils.CursorDebugWrapper": "[django.db.connection]",
            "django.db.models.manager.Manager": "[django.db.models.Manager]",
        }
    ),
    containers=(
        (re.compile(r"django\.db\.models\.manager\.Manager\[(.+)\]"), single_name),
        (re.compile(r"django\.db\.models\.manager\.BaseManager\[(.+)\]"), single_name),
    ),
    multi_containers=(
        (re.compile(r"django\.db\.models\.query\._QuerySet\[(.+)\]"), name_list),
        (re.compile(r"django\.db\.models\.query\.QuerySet\[(.+)\]"), name_list),
    ),
    accessor_suffix=re.compile(r"(?P<base>\w+?)(?:Manager|QuerySet)"),
    placeholder_types=_PLACEHOLDERS,
    receiver_suffixes=("_manager", "_queryset", "_qs", "Manager", "QuerySet"),
)

TYPEORM = FrameworkProfile(
    name="typeorm",
    global_types=MappingProxyType(
        {
            "EntityManager": "[EntityManager]",
            "QueryRunner": "[QueryRunner]",
            "Connection": "[Connection]",
            "DataSource": "[DataSource]",
        }
    ),
    containers=(
        (re.compile(r"Repository<(.+)>"), single_name),
        (re.compile(r"(?:Select|Insert|Update|Delete)QueryBuilder<(.+)>"), single_name),
    ),
    accessor_suffix=re.compile(r"(?P<base>\w+?)(?:Repository|Repo)"),
    placeholder_types=_PLACEHOLDERS,
    receiver_suffixes=("Repository", "Repo"),
)


def _merge(name: str, *profiles: FrameworkProfile) -> FrameworkProfile:
    global_types: dict[str, str] = {}
    for profile in profiles:
        global_types.update(profile.global_types)
    return FrameworkProfile(
        name=name,
        global_types=MappingProxyType(global_types),
        containers=tuple(p for profile in profiles for p in profile.containers),
        multi_containers=tuple(p for profile in profiles for p in profile.multi_containers),
        accessor_suffix=re.compile(r"(?P<base>\w+?)(?:Manager|QuerySet|Repository|Repo)"),
        placeholder_types=_PLACEHOLDERS,
        receiver_suffixes=tuple(
            dict.fromkeys(s for profile in profiles for s in profile.receiver_suffixes)
        ),
    )


GENERIC = _merge("generic", TYPEORM, DJANGO)

PROFILES: Mapping[str, FrameworkProfile] = MappingProxyType(
    {profile.name: profile for profile in (DJANGO, TYPEORM, GENERIC)}
)


def get_profile(name: str) -> FrameworkProfile:
    """Profile for an extractor backend; unknown backends get the generic profile."""
    return PROFILES.get(name, GENERIC)
