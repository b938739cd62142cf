"""Load and save the classified model at its result path."""

from __future__ import annotations

import json
from pathlib import Path

from clue.core.errors import ModelError
from clue.core.logging import get_logger
from clue.model import codec
from clue.model.models import ClassifiedModel

log = get_logger("model.store")


def load_result(path: Path) -> ClassifiedModel | None:
    """Read a persisted result.

    A missing or unparsable file means "no prior result" and returns None so
    that the caller runs a fresh analysis.
    """
    if not path.exists():
        return None
    try:
        model = codec.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, codec.CodecError) as e:
        log.warning("result_unreadable", path=str(path), error=str(e))
        return None
    model.result_path = path
    return model


def load_into(model: ClassifiedModel) -> bool:
    """Replace the content of ``model`` with its persisted result, if any."""
    if model.result_path is None:
        raise ModelError.result_path_unset()
    loaded = load_result(model.result_path)
    if loaded is None:
        return False
    model.replace_with(loaded)
    return True


def save_result(model: ClassifiedModel) -> Path:
    """Serialize the whole model and write it in one call."""
    if model.result_path is None:
        raise ModelError.result_path_unset()
    payload = codec.dumps(model)
    model.result_path.parent.mkdir(parents=True, exist_ok=True)
    model.result_path.write_text(payload, encoding="utf-8")
    log.debug(
        "result_saved",
        path=str(model.result_path),
        entities=len(model.recognized) + len(model.unknown),
    )
    return model.result_path


def delete_result(model: ClassifiedModel) -> None:
    """Remove the persisted result so the next run re-analyzes."""
    if model.result_path is not None:
        model.result_path.unlink(missing_ok=True)
