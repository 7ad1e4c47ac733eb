"""Core configuration and utilities for Song Ranker."""

from songrank.core.config import (
    DEFAULT_DAMPING,
    DEFAULT_ITERATIONS,
    ScoringConfig,
    SessionConfig,
    SongConfig,
    load_config,
)
from songrank.core.errors import (
    ConfigurationError,
    DuplicateSongError,
    EmptyCatalogError,
    InvalidVoteError,
    RankingError,
)

__all__ = [
    "DEFAULT_DAMPING",
    "DEFAULT_ITERATIONS",
    "ScoringConfig",
    "SessionConfig",
    "SongConfig",
    "load_config",
    "ConfigurationError",
    "DuplicateSongError",
    "EmptyCatalogError",
    "InvalidVoteError",
    "RankingError",
]
