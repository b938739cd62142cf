"""Extractor message normalization."""

from clue.extract.messages import (
    ArgumentRecord,
    EntityDeclaration,
    ExtractorOutput,
    MethodCall,
    normalize_messages,
    read_output_file,
)

__all__ = [
    "ArgumentRecord",
    "EntityDeclaration",
    "ExtractorOutput",
    "MethodCall",
    "normalize_messages",
    "read_output_file",
]
