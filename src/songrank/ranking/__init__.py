"""Ranking module for Song Ranker.

Provides pair selection, the vote log, rank centrality scoring, and the
display composer that applies locks and manual ordering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from songrank.ranking.base import Scorer
from songrank.ranking.centrality import (
    RankCentrality,
    build_transition_matrix,
    build_win_matrix,
    power_iterate,
)
from songrank.ranking.display import (
    LockMap,
    apply_manual_order,
    compose_display,
    reorder,
    swap,
    toggle_lock,
)
from songrank.ranking.log import Matchup, MatchupLog
from songrank.ranking.pairs import Progress, UnorderedPair, all_pairs, next_pair, progress

if TYPE_CHECKING:
    from songrank.core.config import ScoringConfig


def create_scorer(config: ScoringConfig | None = None) -> Scorer:
    """Create the scorer described by config.

    Args:
        config: Scoring parameters; library defaults if omitted.

    Returns:
        Configured scorer.
    """
    if config is None:
        return RankCentrality()
    return RankCentrality(damping=config.damping, iterations=config.iterations)


__all__ = [
    "LockMap",
    "Matchup",
    "MatchupLog",
    "Progress",
    "RankCentrality",
    "Scorer",
    "UnorderedPair",
    "all_pairs",
    "apply_manual_order",
    "build_transition_matrix",
    "build_win_matrix",
    "compose_display",
    "create_scorer",
    "next_pair",
    "power_iterate",
    "progress",
    "reorder",
    "swap",
    "toggle_lock",
]
