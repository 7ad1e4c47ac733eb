from .matchup import MatchupRecord
from .song import RankingItem, Song

__all__ = ["MatchupRecord", "RankingItem", "Song"]
