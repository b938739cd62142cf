"""Extractor message schema and normalization.

The extractor writes ``{"messages": [...]}`` where every message carries a
1-based source range and a ``content`` object:

- ``{"type": "model", "name": ...}``: an entity declaration
- ``{"type": "method", "name", "methodType", "object", "objectTypes",
  "attributes"}``: an ORM call site

Both backends are accepted: the Python one spells attribute positions
``startLine`` while the TypeScript one spells them ``start_line``, and
candidate types come as ``objectTypes`` or ``objectType``.

Normalization turns messages into :class:`EntityDeclaration` and
:class:`MethodCall` records with 0-based lines and repo-relative paths.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from clue.core.errors import AnalysisError
from clue.core.logging import get_logger
from clue.model.models import Location, OperationType

log = get_logger("extract.messages")


# =============================================================================
# Wire models
# =============================================================================


class AttributeMessage(BaseModel):
    """A keyword argument of a method call, positioned on its own."""

    model_config = ConfigDict(extra="ignore")

    name: str
    start_line: int = Field(validation_alias=AliasChoices("startLine", "start_line"))
    start_column: int = Field(validation_alias=AliasChoices("startColumn", "start_column"))
    end_line: int = Field(validation_alias=AliasChoices("endLine", "end_line"))
    end_column: int = Field(validation_alias=AliasChoices("endColumn", "end_column"))


class ModelContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["model"]
    name: str


class MethodContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["method"]
    name: str
    method_type: OperationType = Field(validation_alias=AliasChoices("methodType", "method_type"))
    object: str
    object_types: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("objectTypes", "objectType", "object_types"),
    )
    attributes: list[AttributeMessage] = Field(default_factory=list)


class Message(BaseModel):
    """One extractor message with a 1-based source range."""

    model_config = ConfigDict(extra="ignore")

    file_path: str = Field(validation_alias=AliasChoices("filePath", "file_path"))
    from_line: int = Field(validation_alias=AliasChoices("fromLine", "from_line"))
    to_line: int = Field(validation_alias=AliasChoices("toLine", "to_line"))
    from_column: int = Field(validation_alias=AliasChoices("fromColumn", "from_column"))
    to_column: int = Field(validation_alias=AliasChoices("toColumn", "to_column"))
    content: ModelContent | MethodContent = Field(discriminator="type")


# =============================================================================
# Normalized records
# =============================================================================


@dataclass(frozen=True)
class EntityDeclaration:
    name: str
    location: Location


@dataclass(frozen=True)
class ArgumentRecord:
    name: str
    location: Location


@dataclass(frozen=True)
class MethodCall:
    """A call site with its candidate callee types, most confident first."""

    name: str
    receiver: str
    method_type: OperationType
    candidate_types: tuple[str, ...]
    location: Location
    arguments: tuple[ArgumentRecord, ...] = ()

    @property
    def operation_name(self) -> str:
        return f"{self.receiver}.{self.name}"


@dataclass
class ExtractorOutput:
    """Normalized content of one extractor run."""

    declarations: list[EntityDeclaration] = field(default_factory=list)
    calls: list[MethodCall] = field(default_factory=list)
    skipped: int = 0

    @property
    def source_files(self) -> set[str]:
        files = {d.location.file_path for d in self.declarations}
        files.update(c.location.file_path for c in self.calls)
        return files


def _relative_path(file_path: str, root: Path | None) -> str:
    if root is None:
        return file_path
    path = PurePath(file_path)
    if not path.is_absolute():
        return file_path
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return file_path


def _location(
    file_path: str, from_line: int, from_column: int, to_line: int, to_column: int
) -> Location:
    return Location(
        file_path=file_path,
        from_line=from_line - 1,
        from_column=from_column,
        to_line=to_line - 1,
        to_column=to_column,
    )


def normalize_messages(raw_messages: Iterable[Any], *, root: Path | None = None) -> ExtractorOutput:
    """Validate raw messages and convert them to records.

    Messages that fail validation (including unknown content types) are
    skipped and counted; they never abort the run.

    Args:
        raw_messages: Decoded JSON message objects.
        root: Repository root. Absolute paths under it are made relative.
    """
    output = ExtractorOutput()
    for raw in raw_messages:
        try:
            msg = Message.model_validate(raw)
        except ValidationError as e:
            output.skipped += 1
            log.debug("message_skipped", error=e.errors()[0]["msg"])
            continue

        file_path = _relative_path(msg.file_path, root)
        location = _location(file_path, msg.from_line, msg.from_column, msg.to_line, msg.to_column)
        content = msg.content

        if isinstance(content, ModelContent):
            output.declarations.append(EntityDeclaration(name=content.name, location=location))
            continue

        output.calls.append(
            MethodCall(
                name=content.name,
                receiver=content.object,
                method_type=content.method_type,
                candidate_types=tuple(content.object_types),
                location=location,
                arguments=tuple(
                    ArgumentRecord(
                        name=attr.name,
                        location=_location(
                            file_path,
                            attr.start_line,
                            attr.start_column,
                            attr.end_line,
                            attr.end_column,
                        ),
                    )
                    for attr in content.attributes
                ),
            )
        )

    log.debug(
        "messages_normalized",
        declarations=len(output.declarations),
        calls=len(output.calls),
        skipped=output.skipped,
    )
    return output


def read_output_file(path: Path, *, root: Path | None = None) -> ExtractorOutput:
    """Read and normalize an extractor output file.

    Raises:
        AnalysisError: File missing or not a JSON message document.
    """
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise AnalysisError.bad_output(str(path), str(e)) from e

    if isinstance(doc, dict):
        messages = doc.get("messages")
    else:
        messages = doc
    if not isinstance(messages, list):
        raise AnalysisError.bad_output(str(path), "expected a 'messages' list")
    return normalize_messages(messages, root=root)
