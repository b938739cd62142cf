"""Source-control coordinates of the analyzed code."""

from __future__ import annotations

from pathlib import Path

import pygit2

from clue.core.logging import get_logger
from clue.model.models import Repository

log = get_logger("analysis.repository")


def read_repository(path: Path) -> Repository | None:
    """HEAD commit and first remote URL of the repository containing ``path``.

    Returns None outside a git repository. An unborn HEAD gives an empty
    hash, a repository without remotes an empty URL.
    """
    discovered = pygit2.discover_repository(str(path))
    if discovered is None:
        return None
    try:
        repo = pygit2.Repository(discovered)
    except pygit2.GitError as e:
        log.warning("repository_unreadable", path=str(path), error=str(e))
        return None

    commit_hash = "" if repo.head_is_unborn else str(repo.head.peel(pygit2.Commit).id)
    remotes = list(repo.remotes)
    url = (remotes[0].url or "") if remotes else ""
    return Repository(url=url, hash=commit_hash)
