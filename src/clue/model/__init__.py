"""Classified model exports."""

from clue.model.models import (
    OPERATION_TYPES,
    Argument,
    ClassifiedModel,
    Entity,
    Location,
    Operation,
    OperationType,
    Repository,
    ResultGroup,
    is_synthetic_name,
    synthetic_name,
)

__all__ = [
    "OPERATION_TYPES",
    "Argument",
    "ClassifiedModel",
    "Entity",
    "Location",
    "Operation",
    "OperationType",
    "Repository",
    "ResultGroup",
    "is_synthetic_name",
    "synthetic_name",
]
