from .matchup_repository import MatchupRepository
from .paths import StoragePaths
from .store import SessionStore

__all__ = ["MatchupRepository", "SessionStore", "StoragePaths"]
