"""Base protocol for scoring algorithms in Song Ranker."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from songrank.models import RankingItem, Song
from songrank.ranking.log import MatchupLog


@runtime_checkable
class Scorer(Protocol):
    """Protocol for ranking algorithms.

    Implementations recompute every score from the full matchup log on each
    call; they hold no state between calls.
    """

    def score(self, songs: Sequence[Song], log: MatchupLog) -> list[RankingItem]:
        """Score every song.

        Args:
            songs: Active songs, in catalog order.
            log: Full vote history.

        Returns:
            One RankingItem per song, in catalog order.
        """
        ...

    def rank(self, songs: Sequence[Song], log: MatchupLog) -> list[RankingItem]:
        """Score every song and sort by score descending.

        Args:
            songs: Active songs, in catalog order.
            log: Full vote history.

        Returns:
            RankingItems sorted best first; ties keep catalog order.
        """
        ...
