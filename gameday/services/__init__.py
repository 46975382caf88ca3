"""
Service layer: scheduling rules over the record store and season/team directories.
No SQL here; repositories are injected.
"""
from .fixture_engine import (
    FixtureEngine,
    FixtureError,
    SeasonNotFoundError,
    DuplicateGameError,
    SeasonFullError,
    NoTeamsAvailableError,
    InsufficientTeamsError,
    GenerationConflictError,
    InvalidSeasonError,
)
from .rng import RandomSourceError, SecureRNG

__all__ = [
    "FixtureEngine",
    "FixtureError",
    "SeasonNotFoundError",
    "DuplicateGameError",
    "SeasonFullError",
    "NoTeamsAvailableError",
    "InsufficientTeamsError",
    "GenerationConflictError",
    "InvalidSeasonError",
    "RandomSourceError",
    "SecureRNG",
]
