"""Clue error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Analysis (extractor invocation)
- 4xxx: Annotation
- 5xxx: Model (entity/operation editing)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003

    # Analysis (3xxx)
    ANALYSIS_ALREADY_RUNNING = 3001
    ANALYSIS_EXTRACTOR_NOT_FOUND = 3002
    ANALYSIS_BAD_OUTPUT = 3003

    # Annotation (4xxx)
    ANNOTATE_UNSUPPORTED_TAG = 4001

    # Model (5xxx)
    MODEL_DUPLICATE_ENTITY = 5001
    MODEL_ENTITY_NOT_FOUND = 5002
    MODEL_NOT_CUSTOM = 5003
    MODEL_RESULT_PATH_UNSET = 5004
    MODEL_ITEM_NOT_FOUND = 5005


@dataclass(frozen=True, slots=True)
class ClueError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ClueError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )


class AnalysisError(ClueError):
    """Extractor invocation errors."""

    @classmethod
    def already_running(cls) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_ALREADY_RUNNING,
            message="Analyze process is already running.",
            retryable=True,
        )

    @classmethod
    def extractor_not_found(cls, executable: str) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_EXTRACTOR_NOT_FOUND,
            message=f"Extractor executable not found: {executable}",
            details={"executable": executable},
        )

    @classmethod
    def bad_output(cls, path: str, reason: str) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_BAD_OUTPUT,
            message=f"Could not read extractor output at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class AnnotationError(ClueError):
    """Auto-annotation errors."""

    @classmethod
    def unsupported_tag(cls, tag: str, supported: list[str]) -> "AnnotationError":
        return cls(
            code=ErrorCode.ANNOTATE_UNSUPPORTED_TAG,
            message=f"Unsupported auto-annotate tag: {tag}",
            details={"tag": tag, "supported": supported},
        )


class ModelError(ClueError):
    """Errors raised while editing the classified model."""

    @classmethod
    def duplicate_entity(cls, name: str, group: str) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_DUPLICATE_ENTITY,
            message=f'Entity "{name}" already exists in the list of {group.lower()} entities',
            details={"name": name, "group": group},
        )

    @classmethod
    def entity_not_found(cls, name: str, group: str) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_ENTITY_NOT_FOUND,
            message=f'Entity "{name}" not found in {group}',
            details={"name": name, "group": group},
        )

    @classmethod
    def not_custom(cls, kind: str, name: str) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_NOT_CUSTOM,
            message=f'Cannot remove {kind} "{name}": only custom items can be removed. '
            "Re-run the analysis to rebuild extracted items.",
            details={"kind": kind, "name": name},
        )

    @classmethod
    def item_not_found(cls, kind: str, parent: str, index: int) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_ITEM_NOT_FOUND,
            message=f"No {kind} at index {index} of {parent}",
            details={"kind": kind, "parent": parent, "index": index},
        )

    @classmethod
    def result_path_unset(cls) -> "ModelError":
        return cls(
            code=ErrorCode.MODEL_RESULT_PATH_UNSET,
            message="Result path is not set",
        )
