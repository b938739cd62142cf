"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides small model builders shared by the test packages.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local clue package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of clue modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("clue"):
        del sys.modules[module_name]

from clue.model.models import (  # noqa: E402
    Argument,
    ClassifiedModel,
    Entity,
    Location,
    Operation,
)


def loc(line: int, column: int = 0, path: str = "app/views.py") -> Location:
    """One-line location starting at ``line``."""
    return Location(
        file_path=path, from_line=line, from_column=column, to_line=line, to_column=column + 10
    )


def op(name: str, *args: str, type: str = "read", note: str = "", line: int = 0) -> Operation:
    """Operation with located arguments named ``args``."""
    return Operation(
        name=name,
        type=type,  # type: ignore[arg-type]
        arguments=[Argument(name=a, location=loc(line, 20 + i)) for i, a in enumerate(args)],
        note=note,
        location=loc(line),
    )


@pytest.fixture
def model() -> ClassifiedModel:
    """A model with two Recognized entities and one Unknown bucket."""
    m = ClassifiedModel()
    m.recognized["app.User"] = Entity(
        name="app.User",
        operations=[
            op("User.objects.filter", "name", "age__gte", line=1),
            op("User.objects.all", line=2),
        ],
        location=loc(0, path="app/models.py"),
    )
    m.recognized["app.Post"] = Entity(
        name="app.Post",
        operations=[op("Post.objects.get", "id", line=3)],
        location=loc(5, path="app/models.py"),
    )
    m.unknown["typing.Any"] = Entity(
        name="typing.Any",
        operations=[
            op("user.save", type="write", line=4),
            op("posts.count", line=5),
            op("cache.get", line=6),
        ],
    )
    return m


@pytest.fixture
def make_op() -> Callable[..., Operation]:
    """Factory for located operations: ``make_op("User.objects.filter", "name")``."""
    return op


@pytest.fixture
def make_loc() -> Callable[..., Location]:
    return loc
