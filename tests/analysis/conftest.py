"""Fixtures for analysis tests: a scripted extractor and git repositories."""

from __future__ import annotations

import json
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pygit2
import pytest

from clue.config.models import ClueConfig

# Copies a prepared message file to the output path given by the session
COPY_SCRIPT = (
    "import shutil, sys; print('analyzing', flush=True); shutil.copy(sys.argv[1], sys.argv[2])"
)
FAIL_SCRIPT = "import sys; sys.stderr.write('parse error in app/views.py'); sys.exit(3)"
HANG_SCRIPT = "import time; print('started', flush=True); time.sleep(30)"


def custom_config(*argv: str) -> ClueConfig:
    """Config running ``python -c ...`` as the custom extractor."""
    return ClueConfig.model_validate(
        {"extractor": {"backend": "custom", "command": [sys.executable, "-c", *argv]}}
    )


def extractor_messages(root: Path) -> dict[str, Any]:
    """Two entities and three calls, one of them unresolvable."""

    def message(line: int, content: dict[str, Any], path: str = "app/views.py") -> dict[str, Any]:
        return {
            "filePath": str(root / path),
            "fromLine": line,
            "toLine": line,
            "fromColumn": 4,
            "toColumn": 30,
            "content": content,
        }

    def call(line: int, receiver: str, name: str, *types: str, **extra: Any) -> dict[str, Any]:
        content = {
            "type": "method",
            "name": name,
            "methodType": "read",
            "object": receiver,
            "objectTypes": list(types),
            "attributes": [],
            **extra,
        }
        return message(line, content)

    return {
        "messages": [
            message(1, {"type": "model", "name": "app.models.User"}, "app/models.py"),
            message(9, {"type": "model", "name": "app.models.Post"}, "app/models.py"),
            call(
                3,
                "User.objects",
                "filter",
                "django.db.models.manager.Manager[app.models.User]",
                attributes=[
                    {
                        "name": "age__gte",
                        "startLine": 3,
                        "startColumn": 20,
                        "endLine": 3,
                        "endColumn": 28,
                    }
                ],
            ),
            call(4, "Post.objects", "all", "app.models.PostManager"),
            call(5, "cache", "get", "redis.Redis"),
        ]
    }


@pytest.fixture
def messages_file(tmp_path: Path) -> Path:
    path = tmp_path / "fixture-messages.json"
    path.write_text(json.dumps(extractor_messages(tmp_path.resolve())))
    return path


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[pygit2.Repository, None, None]:
    """Create a temporary git repository with initial commit and a remote."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    (repo_path / "models.py").write_text("class User: ...\n")
    repo.index.add("models.py")
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    repo.create_commit("refs/heads/main", sig, sig, "Initial commit", tree, [])
    repo.set_head("refs/heads/main")
    repo.remotes.create("origin", "https://example.com/acme/shop.git")

    yield repo


@pytest.fixture
def ok_config(messages_file: Path) -> ClueConfig:
    """Extractor that succeeds with the prepared messages."""
    return custom_config(COPY_SCRIPT, str(messages_file), "{output}")


@pytest.fixture
def failing_config() -> ClueConfig:
    return custom_config(FAIL_SCRIPT)


@pytest.fixture
def hanging_config() -> ClueConfig:
    """Extractor that reports progress and never finishes on its own."""
    return custom_config(HANG_SCRIPT)
