"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CLUE__SECTION__KEY)
3. Repo YAML (.clue/config.yaml)
4. Global YAML (~/.config/clue/config.yaml)
5. Built-in defaults (this file)

Examples:
    CLUE__LOGGING__LEVEL=DEBUG
    CLUE__EXTRACTOR__BACKEND=typeorm
    CLUE__EXTRACTOR__BATCH_SIZE=100
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Backend = Literal["django", "typeorm", "custom"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CLUE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG prints every resolution decision.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractorConfig(BaseModel):
    """External extractor invocation.

    Env vars:
        CLUE__EXTRACTOR__BACKEND: django, typeorm or custom
        CLUE__EXTRACTOR__ROOT_DIR: Directory to analyze, relative to the repo root
        CLUE__EXTRACTOR__BATCH_SIZE: Files per extractor batch (typeorm)
        CLUE__EXTRACTOR__PYTHON: Interpreter used for the django extractor
    """

    backend: Backend = Field(
        default="django",
        description="Extractor backend. 'custom' requires 'command'.",
    )
    root_dir: str = Field(
        default=".",
        description="Root directory of the files to analyze, relative to the repo root.",
    )
    exclude: list[str] = Field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/dist/**",
            "**/build/**",
            "**/out/**",
            "**/target/**",
            "**/.vscode/**",
            "**/.git/**",
            "**/.github/**",
            "**/test*",
            "**/tests/**",
            "**/migrations/**",
        ],
        description="Glob patterns of files the extractor should skip.",
    )
    batch_size: int = Field(
        default=50,
        description="Number of files the extractor analyzes per batch.",
    )
    python: str = Field(
        default="python3",
        description="Python interpreter that has the django extractor installed.",
    )
    command: list[str] | None = Field(
        default=None,
        description="Command template for the custom backend. "
        "Placeholders: {root}, {output}, {batch_size}.",
    )

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"batch_size must be positive, got {v}")
        return v


class StorageConfig(BaseModel):
    """Where analysis results are persisted.

    Env vars:
        CLUE__STORAGE__RESULT_DIR: Directory for result files, relative to the repo root
    """

    result_dir: str = Field(
        default=".clue",
        description="Directory holding result files.",
    )
    result_file: str = Field(
        default="{backend}.json",
        description="Result file name. {backend} is replaced by the extractor backend.",
    )


class AnnotateConfig(BaseModel):
    """Auto-annotation behavior.

    Env vars:
        CLUE__ANNOTATE__DOUBLE_CHECK: Report manual tags the heuristics disagree with
    """

    double_check: bool = Field(
        default=True,
        description="Emit 'double-check' diagnostics for manual tags whose "
        "condition no longer holds.",
    )


class ClueConfig(BaseModel):
    """Root configuration for Clue.

    All settings can be configured via:
    1. Environment variables: CLUE__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    annotate: AnnotateConfig = Field(default_factory=AnnotateConfig)
