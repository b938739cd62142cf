"""CLI utilities."""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from clue.config.loader import REPO_CONFIG_DIR, get_result_path, load_config
from clue.config.models import ClueConfig
from clue.core.errors import ClueError
from clue.model.models import ClassifiedModel, Location, ResultGroup
from clue.model.store import load_into, save_result

GROUP_CHOICE = click.Choice(["recognized", "unknown"], case_sensitive=False)

_LOCATION = re.compile(
    r"^(?P<path>.+?):(?P<line>\d+):(?P<col>\d+)(?:-(?P<eline>\d+):(?P<ecol>\d+))?$"
)


def find_repo_root(start_path: Path | None = None) -> Path:
    """Find the project root from the given path.

    Walks up the directory tree looking for a ``.clue`` or ``.git``
    directory. Falls back to ``start_path`` itself when neither exists, so
    projects outside version control can still be analyzed.
    """
    if start_path is None:
        start_path = Path.cwd()

    start = start_path.resolve()
    current = start
    while True:
        if (current / REPO_CONFIG_DIR).is_dir() or (current / ".git").exists():
            return current
        if current == current.parent:
            return start
        current = current.parent


def to_group(name: str) -> ResultGroup:
    return ResultGroup[name.upper()]


def parse_location(text: str) -> Location:
    """``path:line:col[-line:col]`` with 1-based lines, as printed by editors."""
    match = _LOCATION.match(text)
    if match is None:
        raise click.BadParameter(f"Expected PATH:LINE:COL[-LINE:COL], got {text!r}")
    from_line = int(match["line"]) - 1
    from_column = int(match["col"])
    to_line = int(match["eline"]) - 1 if match["eline"] else from_line
    to_column = int(match["ecol"]) if match["ecol"] else from_column
    return Location(
        file_path=match["path"],
        from_line=from_line,
        from_column=from_column,
        to_line=to_line,
        to_column=to_column,
    )


def format_location(location: Location | None) -> str:
    if location is None:
        return ""
    return f"{location.file_path}:{location.from_line + 1}:{location.from_column}"


@contextmanager
def cli_errors() -> Iterator[None]:
    """Surface ClueError as a click error with its message."""
    try:
        yield
    except ClueError as e:
        raise click.ClickException(str(e)) from e


@dataclass
class Workspace:
    """Repository root, resolved config and the model persisted for it."""

    repo_root: Path
    config: ClueConfig
    model: ClassifiedModel

    def save(self) -> Path:
        return save_result(self.model)


def open_workspace(
    ctx: click.Context, *, require_result: bool = True, **overrides: Any
) -> Workspace:
    """Load config and the persisted model for the repository selected on the group.

    Raises:
        click.ClickException: Config is invalid, or ``require_result`` is set
            and nothing has been analyzed yet.
    """
    obj = ctx.find_root().obj or {}
    repo_root = find_repo_root(obj.get("root"))
    with cli_errors():
        config = load_config(repo_root, **overrides)
    model = ClassifiedModel(result_path=get_result_path(repo_root, config))
    if not load_into(model) and require_result:
        raise click.ClickException(
            f"No analysis result at {model.result_path}. Run 'clue analyze' first."
        )
    return Workspace(repo_root=repo_root, config=config, model=model)
