"""Reorganization engine - move, merge and recognize model items."""

from clue.reorganize.locators import Locator
from clue.reorganize.ops import (
    MOVED_BUCKET,
    MoveResult,
    add_argument,
    add_entity,
    add_operation,
    merge_entities,
    move_arguments,
    move_entity,
    move_operations,
    move_operations_to_unknown,
    remove_argument,
    remove_entity,
    remove_operation,
)
from clue.reorganize.suggest import RecognitionStep, apply_steps, suggest_recognition

__all__ = [
    "MOVED_BUCKET",
    "Locator",
    "MoveResult",
    "RecognitionStep",
    "add_argument",
    "add_entity",
    "add_operation",
    "apply_steps",
    "merge_entities",
    "move_arguments",
    "move_entity",
    "move_operations",
    "move_operations_to_unknown",
    "remove_argument",
    "remove_entity",
    "remove_operation",
    "suggest_recognition",
]
