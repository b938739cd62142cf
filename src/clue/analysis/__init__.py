"""Extractor invocation and analysis sessions."""

from clue.analysis.extractor import ExtractorCommand, build_command
from clue.analysis.repository import read_repository
from clue.analysis.session import AnalysisOutcome, AnalysisSession

__all__ = [
    "AnalysisOutcome",
    "AnalysisSession",
    "ExtractorCommand",
    "build_command",
    "read_repository",
]
