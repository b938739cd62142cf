"""Entity resolution - attach call sites to entities."""

from clue.resolve.patterns import DJANGO, GENERIC, PROFILES, TYPEORM, FrameworkProfile, get_profile
from clue.resolve.resolver import UNTYPED_BUCKET, EntityResolver, ResolutionStats

__all__ = [
    "DJANGO",
    "GENERIC",
    "PROFILES",
    "TYPEORM",
    "UNTYPED_BUCKET",
    "EntityResolver",
    "FrameworkProfile",
    "ResolutionStats",
    "get_profile",
]
