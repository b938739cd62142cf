"""Annotation engine - derived tags in entity and operation notes."""

from clue.annotate.ops import (
    OPERATION_LEVEL_TAGS,
    SUPPORTED_AUTO_ANNOTATE_TAGS,
    auto_annotate,
    auto_annotate_all,
    clear_auto_annotations,
    summarize_entity_tags,
)

__all__ = [
    "OPERATION_LEVEL_TAGS",
    "SUPPORTED_AUTO_ANNOTATE_TAGS",
    "auto_annotate",
    "auto_annotate_all",
    "clear_auto_annotations",
    "summarize_entity_tags",
]
