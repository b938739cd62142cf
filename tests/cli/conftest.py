"""Fixtures for CLI tests: an isolated global config and a saved project."""

from __future__ import annotations

from pathlib import Path

import pytest

from clue.model.models import ClassifiedModel
from clue.model.store import save_result


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's ~/.config/clue out of CLI runs."""
    monkeypatch.setattr("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")


@pytest.fixture
def project(tmp_path: Path, model: ClassifiedModel) -> Path:
    """Project directory with the shared model saved as the django result."""
    root = tmp_path / "project"
    root.mkdir()
    model.result_path = root / ".clue" / "django.json"
    save_result(model)
    return root.resolve()
