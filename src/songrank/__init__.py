"""Song Ranker.

Rank a set of songs purely through repeated pairwise choices, using
weighted rank centrality with manual locks and reordering on top.
"""

from songrank.models import RankingItem, Song
from songrank.session import RankingEngine, SessionState

__version__ = "0.1.0"
__all__ = [
    "RankingEngine",
    "RankingItem",
    "SessionState",
    "Song",
    "__version__",
]
