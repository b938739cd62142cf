"""Clue - ORM usage classification and workload annotation."""

__version__ = "0.1.0"
