"""Core module exports."""

from clue.core.errors import (
    AnalysisError,
    AnnotationError,
    ClueError,
    ConfigError,
    ErrorCode,
    ModelError,
)
from clue.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from clue.core.progress import spinner, status

__all__ = [
    # Errors
    "AnalysisError",
    "AnnotationError",
    "ClueError",
    "ConfigError",
    "ErrorCode",
    "ModelError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "spinner",
    "status",
]
