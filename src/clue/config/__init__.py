"""Config module exports."""

from clue.config.loader import ClueSettings, get_result_path, load_config
from clue.config.models import (
    AnnotateConfig,
    ClueConfig,
    ExtractorConfig,
    LoggingConfig,
    StorageConfig,
)

__all__ = [
    "load_config",
    "get_result_path",
    "ClueConfig",
    "ClueSettings",
    "AnnotateConfig",
    "ExtractorConfig",
    "LoggingConfig",
    "StorageConfig",
]
