"""Entity resolution: attach extracted call sites to entities.

Resolution Algorithm:
1. Seed the Recognized group with every declared entity (duplicates are
   reported and dropped, the first declaration wins) and, when the group is
   empty, with the profile's bracket entities.
2. For each method call, build an Operation and try every candidate callee
   type in order against these rules, stopping at the first hit:
   a. exact framework-global type -> bracket entity
   b. single-name generic container (``Repository<Foo>``)
   c. multi-name generic container (``_QuerySet[Foo, Bar]``), first Recognized wins
   d. accessor suffix (``FooManager``) -> unique base name
   e. placeholder type -> base name guessed from the receiver identifier
   f. exact qualified entity name
3. Unmatched calls go to an Unknown pseudo-entity named after the first
   candidate type.

Every call ends up in exactly one entity.

Usage::

    resolver = EntityResolver(model, DJANGO)
    stats = resolver.resolve(output)
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from clue.core.logging import get_logger
from clue.extract.messages import EntityDeclaration, ExtractorOutput, MethodCall
from clue.model.models import Argument, ClassifiedModel, Entity, Operation
from clue.resolve.names import BaseNameMap, base_name, build_base_name_map, strip_suffix, to_pascal
from clue.resolve.patterns import GENERIC, FrameworkProfile, extract_names

log = get_logger("resolve")

# Bucket for calls the extractor reported without any candidate type
UNTYPED_BUCKET = "[untyped]"


@dataclass
class ResolutionStats:
    """Counts from one resolution pass."""

    declared: int = 0
    duplicates: list[str] = field(default_factory=list)
    recognized: int = 0
    unknown: int = 0
    by_rule: Counter[str] = field(default_factory=Counter)

    @property
    def warnings(self) -> list[str]:
        return [f"Entity {name} is defined multiple times." for name in self.duplicates]


def build_operation(call: MethodCall) -> Operation:
    """Fresh Operation for a call site; arguments keep their own locations."""
    return Operation(
        name=call.operation_name,
        type=call.method_type,
        arguments=[Argument(name=a.name, location=a.location) for a in call.arguments],
        location=call.location,
    )


class EntityResolver:
    """Classifies call sites of one extractor run into a ClassifiedModel."""

    def __init__(
        self,
        model: ClassifiedModel,
        profile: FrameworkProfile = GENERIC,
        *,
        on_warning: Callable[[str], None] | None = None,
    ) -> None:
        self._model = model
        self._profile = profile
        self._on_warning = on_warning
        self._base_names: BaseNameMap = {}
        self._rules: tuple[tuple[str, Callable[[str, MethodCall], str | None]], ...] = (
            ("global", self._match_global),
            ("container", self._match_container),
            ("multi_container", self._match_multi_container),
            ("accessor_suffix", self._match_accessor_suffix),
            ("receiver_convention", self._match_receiver_convention),
            ("exact", self._match_exact),
        )

    @property
    def base_names(self) -> BaseNameMap:
        return self._base_names

    def resolve(self, output: ExtractorOutput) -> ResolutionStats:
        stats = ResolutionStats()
        self.collect_entities(output.declarations, stats)
        self.collect_operations(output.calls, stats)
        self._model.sources.update(output.source_files)
        log.info(
            "resolution_done",
            declared=stats.declared,
            duplicates=len(stats.duplicates),
            recognized=stats.recognized,
            unknown=stats.unknown,
        )
        return stats

    def collect_entities(
        self, declarations: Iterable[EntityDeclaration], stats: ResolutionStats | None = None
    ) -> ResolutionStats:
        stats = stats or ResolutionStats()
        entities = self._model.recognized
        if not entities:
            for name in self._profile.synthetic_entities:
                entities[name] = Entity(name=name)

        for declaration in declarations:
            if declaration.name in entities:
                stats.duplicates.append(declaration.name)
                message = f"Entity {declaration.name} is defined multiple times."
                log.warning("duplicate_entity", entity=declaration.name)
                if self._on_warning is not None:
                    self._on_warning(message)
                continue
            entities[declaration.name] = Entity(
                name=declaration.name, location=declaration.location
            )
            stats.declared += 1
        return stats

    def collect_operations(
        self, calls: Iterable[MethodCall], stats: ResolutionStats | None = None
    ) -> ResolutionStats:
        stats = stats or ResolutionStats()
        self._base_names = build_base_name_map(self._model.recognized)

        for call in calls:
            operation = build_operation(call)
            matched = self.match(call)
            if matched is not None:
                entity, rule = matched
                entity.operations.append(operation)
                stats.recognized += 1
                stats.by_rule[rule] += 1
                continue

            bucket = call.candidate_types[0] if call.candidate_types else UNTYPED_BUCKET
            unknowns = self._model.unknown
            if bucket not in unknowns:
                unknowns[bucket] = Entity(name=bucket)
            unknowns[bucket].operations.append(operation)
            stats.unknown += 1
            stats.by_rule["unknown"] += 1
        return stats

    def match(self, call: MethodCall) -> tuple[Entity, str] | None:
        """First (entity, rule name) hit over candidate types, in priority order."""
        for type_name in call.candidate_types:
            for rule, matcher in self._rules:
                entity_name = matcher(type_name, call)
                if entity_name is None:
                    continue
                entity = self._model.recognized.get(entity_name)
                if entity is not None:
                    log.debug(
                        "call_resolved", call=call.operation_name, entity=entity_name, rule=rule
                    )
                    return entity, rule
        return None

    # -------------------------------------------------------------------------
    # Rules: each returns a candidate Recognized entity name or None
    # -------------------------------------------------------------------------

    def _match_global(self, type_name: str, call: MethodCall) -> str | None:  # noqa: ARG002
        name = self._profile.global_types.get(type_name)
        if name is None:
            return None
        # Bracket entities are seeded only into an empty group
        if self._model.find_group(name) is None:
            self._model.recognized[name] = Entity(name=name)
        return name

    def _match_container(self, type_name: str, call: MethodCall) -> str | None:  # noqa: ARG002
        names = extract_names(self._profile.containers, type_name)
        return names[0] if names else None

    def _match_multi_container(
        self, type_name: str, call: MethodCall  # noqa: ARG002
    ) -> str | None:
        for name in extract_names(self._profile.multi_containers, type_name):
            if name in self._model.recognized:
                return name
        return None

    def _match_accessor_suffix(
        self, type_name: str, call: MethodCall  # noqa: ARG002
    ) -> str | None:
        if self._profile.accessor_suffix is None:
            return None
        match = self._profile.accessor_suffix.fullmatch(base_name(type_name))
        if match is None:
            return None
        return self._base_names.get(match.group("base"))

    def _match_receiver_convention(self, type_name: str, call: MethodCall) -> str | None:
        if type_name not in self._profile.placeholder_types:
            return None
        for candidate in self._receiver_base_names(call.receiver):
            qualified = self._base_names.get(candidate)
            if qualified is not None:
                return qualified
        return None

    def _match_exact(self, type_name: str, call: MethodCall) -> str | None:  # noqa: ARG002
        return type_name

    def _receiver_base_names(self, receiver: str) -> list[str]:
        """Base names guessed from a receiver such as ``User.objects`` or ``this.userRepo``."""
        segments = [s for s in receiver.split(".") if s]
        if not segments:
            return []
        candidates = [segments[0], to_pascal(segments[0])]
        stripped = strip_suffix(segments[-1], self._profile.receiver_suffixes)
        if stripped:
            candidates.append(to_pascal(stripped))
        return list(dict.fromkeys(candidates))
