"""Extractor command lines per backend."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from clue.config.models import ExtractorConfig
from clue.core.errors import ConfigError

DJANGO_MODULE = "splinter"
TYPEORM_PACKAGE = "@ctring/splinter-eslint"


@dataclass(frozen=True)
class ExtractorCommand:
    argv: list[str]
    output_path: Path
    cwd: Path | None = None

    @property
    def executable(self) -> str:
        return self.argv[0]


def build_command(config: ExtractorConfig, root: Path, output_path: Path) -> ExtractorCommand:
    """Command running the configured extractor on ``root``.

    Raises:
        ConfigError: The custom backend has no command template.
    """
    if config.backend == "django":
        argv = [config.python, "-m", DJANGO_MODULE, str(root), "--output", str(output_path)]
        for pattern in config.exclude:
            argv += ["--exclude-glob", pattern]
        return ExtractorCommand(argv=argv, output_path=output_path)

    if config.backend == "typeorm":
        argv = [
            "npx",
            TYPEORM_PACKAGE,
            str(root),
            "--output",
            str(output_path),
            "--batch",
            str(config.batch_size),
        ]
        return ExtractorCommand(argv=argv, output_path=output_path, cwd=root)

    if not config.command:
        raise ConfigError.missing_required("extractor.command")
    values = {"root": str(root), "output": str(output_path), "batch_size": str(config.batch_size)}
    argv = [part.format(**values) for part in config.command]
    return ExtractorCommand(argv=argv, output_path=output_path, cwd=root)
