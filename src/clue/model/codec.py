"""JSON codec for the classified model.

Keyed collections and sets are tagged explicitly so they survive the round
trip with their uniqueness semantics::

    {"dataType": "Map", "value": [[key, value], ...]}
    {"dataType": "Set", "value": [item, ...]}

The document layout is::

    {
      "resultPath": "/repo/.clue/django.json",
      "repository": {"url": "...", "hash": "..."},
      "group": Map<"Recognized" | "Unknown", Map<entity name, Entity>>,
      "sources": Set<file path>
    }

Item fields keep their wire names (``selection``, ``filePath``, ``isCustom``).
Items without a location have no ``selection`` key.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from clue.model.models import (
    Argument,
    ClassifiedModel,
    Entity,
    Location,
    Operation,
    Repository,
    ResultGroup,
)

T = TypeVar("T")

MAP_TAG = "Map"
SET_TAG = "Set"


class CodecError(ValueError):
    """The document does not follow the persisted model layout."""


# =============================================================================
# Tagged containers
# =============================================================================


def encode_map(mapping: dict[str, T], encode_value: Callable[[T], Any]) -> dict[str, Any]:
    return {"dataType": MAP_TAG, "value": [[key, encode_value(v)] for key, v in mapping.items()]}


def decode_map(obj: Any, decode_value: Callable[[Any], T]) -> dict[str, T]:
    pairs = _tagged_value(obj, MAP_TAG)
    result: dict[str, T] = {}
    for pair in pairs:
        if not isinstance(pair, list) or len(pair) != 2:
            raise CodecError(f"Map entry must be a [key, value] pair, got {pair!r}")
        key, value = pair
        result[str(key)] = decode_value(value)
    return result


def encode_set(items: set[str]) -> dict[str, Any]:
    return {"dataType": SET_TAG, "value": sorted(items)}


def decode_set(obj: Any) -> set[str]:
    return {str(item) for item in _tagged_value(obj, SET_TAG)}


def _tagged_value(obj: Any, tag: str) -> list[Any]:
    if not isinstance(obj, dict) or obj.get("dataType") != tag:
        raise CodecError(f"Expected a tagged {tag}, got {obj!r}")
    value = obj.get("value")
    if not isinstance(value, list):
        raise CodecError(f"Tagged {tag} value must be a list")
    return value


# =============================================================================
# Items
# =============================================================================


def encode_location(location: Location) -> dict[str, Any]:
    return {
        "filePath": location.file_path,
        "fromLine": location.from_line,
        "fromColumn": location.from_column,
        "toLine": location.to_line,
        "toColumn": location.to_column,
    }


def decode_location(obj: Any) -> Location | None:
    if obj is None:
        return None
    try:
        return Location(
            file_path=str(obj["filePath"]),
            from_line=int(obj["fromLine"]),
            from_column=int(obj["fromColumn"]),
            to_line=int(obj["toLine"]),
            to_column=int(obj["toColumn"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CodecError(f"Malformed selection: {obj!r}") from e


def _with_selection(payload: dict[str, Any], location: Location | None) -> dict[str, Any]:
    if location is not None:
        return {"selection": encode_location(location), **payload}
    return payload


def encode_argument(argument: Argument) -> dict[str, Any]:
    return _with_selection(
        {"name": argument.name, "note": argument.note, "isCustom": argument.is_custom},
        argument.location,
    )


def decode_argument(obj: dict[str, Any]) -> Argument:
    return Argument(
        name=_require(obj, "name"),
        note=obj.get("note", ""),
        is_custom=bool(obj.get("isCustom", False)),
        location=decode_location(obj.get("selection")),
    )


def encode_operation(operation: Operation) -> dict[str, Any]:
    return _with_selection(
        {
            "name": operation.name,
            "arguments": [encode_argument(a) for a in operation.arguments],
            "type": operation.type,
            "note": operation.note,
            "isCustom": operation.is_custom,
        },
        operation.location,
    )


def decode_operation(obj: dict[str, Any]) -> Operation:
    return Operation(
        name=_require(obj, "name"),
        type=obj.get("type", "other"),
        arguments=[decode_argument(a) for a in _list(obj, "arguments")],
        note=obj.get("note", ""),
        is_custom=bool(obj.get("isCustom", False)),
        location=decode_location(obj.get("selection")),
    )


def encode_entity(entity: Entity) -> dict[str, Any]:
    return _with_selection(
        {
            "name": entity.name,
            "operations": [encode_operation(o) for o in entity.operations],
            "note": entity.note,
            "isCustom": entity.is_custom,
        },
        entity.location,
    )


def decode_entity(obj: dict[str, Any]) -> Entity:
    return Entity(
        name=_require(obj, "name"),
        operations=[decode_operation(o) for o in _list(obj, "operations")],
        note=obj.get("note", ""),
        is_custom=bool(obj.get("isCustom", False)),
        location=decode_location(obj.get("selection")),
    )


def _require(obj: Any, key: str) -> Any:
    if not isinstance(obj, dict) or key not in obj:
        raise CodecError(f"Missing '{key}' in {obj!r}")
    return obj[key]


def _list(obj: dict[str, Any], key: str) -> list[Any]:
    value = obj.get(key, [])
    if not isinstance(value, list):
        raise CodecError(f"'{key}' must be a list, got {value!r}")
    return value


# =============================================================================
# Model
# =============================================================================


def encode_model(model: ClassifiedModel) -> dict[str, Any]:
    groups = {group.value: entities for group, entities in model.groups.items()}
    doc: dict[str, Any] = {
        "resultPath": str(model.result_path) if model.result_path else None,
        "group": encode_map(groups, lambda entities: encode_map(entities, encode_entity)),
        "sources": encode_set(model.sources),
    }
    if model.repository is not None:
        doc["repository"] = {"url": model.repository.url, "hash": model.repository.hash}
    return doc


def decode_model(doc: Any) -> ClassifiedModel:
    if not isinstance(doc, dict):
        raise CodecError("Persisted model must be a JSON object")

    model = ClassifiedModel()
    groups = decode_map(_require(doc, "group"), lambda obj: decode_map(obj, decode_entity))
    for name, entities in groups.items():
        try:
            group = ResultGroup(name)
        except ValueError as e:
            raise CodecError(f"Unknown result group: {name}") from e
        model.groups[group] = entities

    if doc.get("resultPath"):
        model.result_path = Path(doc["resultPath"])
    repository = doc.get("repository")
    if repository:
        if not isinstance(repository, dict):
            raise CodecError(f"Malformed repository: {repository!r}")
        model.repository = Repository(
            url=repository.get("url", ""), hash=repository.get("hash", "")
        )
    if "sources" in doc:
        model.sources = decode_set(doc["sources"])
    return model


def dumps(model: ClassifiedModel, *, indent: int | None = None) -> str:
    return json.dumps(encode_model(model), indent=indent)


def loads(data: str) -> ClassifiedModel:
    """Parse a persisted model.

    Raises:
        CodecError: Document layout is wrong.
        json.JSONDecodeError: Text is not JSON.
    """
    return decode_model(json.loads(data))
