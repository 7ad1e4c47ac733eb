"""Weighted rank centrality with damping.

A song's score is the stationary probability of a damped random walk in
which every loser points at the songs that beat it. Column ``j`` of the
transition matrix spreads song ``j``'s mass over the songs that beat it,
in proportion to the weight of those wins.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from songrank.models import RankingItem, Song
from songrank.ranking.log import MatchupLog

DEFAULT_DAMPING = 0.85
DEFAULT_ITERATIONS = 100


def build_win_matrix(song_ids: Sequence[str], log: MatchupLog) -> NDArray[np.float64]:
    """Build the weighted win matrix.

    ``W[i, j]`` sums the weights of every vote where song ``i`` beat song
    ``j``. A vote at sequence index ``k`` in a log of length ``m`` weighs
    ``m - k``, so earlier votes count more than later ones.

    Args:
        song_ids: Active song ids; row/column order of the matrix.
        log: Full vote history.

    Returns:
        An n x n matrix of non-negative weights.
    """
    index = {song_id: i for i, song_id in enumerate(song_ids)}
    n = len(song_ids)
    wins = np.zeros((n, n), dtype=np.float64)
    for matchup in log:
        winner = index.get(matchup.winner_id)
        loser = index.get(matchup.loser_id)
        if winner is None or loser is None:
            continue
        wins[winner, loser] += log.weight(matchup)
    return wins


def build_transition_matrix(wins: NDArray[np.float64]) -> NDArray[np.float64]:
    """Normalize each column of the win matrix into a distribution.

    A column with no loss weight (an undefeated or unplayed song) becomes
    uniform, so no song acts as a rank sink.

    Args:
        wins: Weighted win matrix from :func:`build_win_matrix`.

    Returns:
        A column-stochastic n x n matrix.
    """
    n = wins.shape[0]
    transition = np.empty_like(wins)
    loss_totals = wins.sum(axis=0)
    for j in range(n):
        if loss_totals[j] > 0:
            transition[:, j] = wins[:, j] / loss_totals[j]
        else:
            transition[:, j] = 1.0 / n
    return transition


def power_iterate(
    transition: NDArray[np.float64],
    start: NDArray[np.float64] | None = None,
    damping: float = DEFAULT_DAMPING,
    iterations: int = DEFAULT_ITERATIONS,
) -> NDArray[np.float64]:
    """Run a fixed number of damped power-iteration steps.

    Each step computes ``P @ v``, renormalizes it to sum to one (dividing by
    one if the sum is zero) and mixes in ``(1 - damping) / n`` of uniform
    teleportation.

    Args:
        transition: Column-stochastic transition matrix.
        start: Initial vector; uniform if omitted.
        damping: Walk weight in ``[0, 1]``.
        iterations: Exact number of steps to run.

    Returns:
        The score vector after the final step.
    """
    n = transition.shape[0]
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    v = np.full(n, 1.0 / n) if start is None else np.asarray(start, dtype=np.float64).copy()
    teleport = (1.0 - damping) / n
    for _ in range(iterations):
        v_new = transition @ v
        norm = v_new.sum() or 1.0
        v = damping * (v_new / norm) + teleport
    return v


class RankCentrality:
    """Rank centrality scorer implementing the Scorer protocol.

    Attributes:
        damping: Walk weight against uniform teleportation.
        iterations: Fixed number of power-iteration steps.
    """

    def __init__(
        self,
        damping: float = DEFAULT_DAMPING,
        iterations: int = DEFAULT_ITERATIONS,
    ) -> None:
        """Initialize the scorer.

        Args:
            damping: Walk weight in ``[0, 1]``.
            iterations: Number of power-iteration steps.
        """
        self.damping = damping
        self.iterations = iterations

    def score_vector(self, song_ids: Sequence[str], log: MatchupLog) -> NDArray[np.float64]:
        """Compute raw scores aligned with ``song_ids``."""
        wins = build_win_matrix(song_ids, log)
        transition = build_transition_matrix(wins)
        return power_iterate(transition, damping=self.damping, iterations=self.iterations)

    def score(self, songs: Sequence[Song], log: MatchupLog) -> list[RankingItem]:
        """Score every song, in catalog order."""
        scores = self.score_vector([s.id for s in songs], log)
        return [RankingItem(song=song, score=float(scores[i])) for i, song in enumerate(songs)]

    def rank(self, songs: Sequence[Song], log: MatchupLog) -> list[RankingItem]:
        """Score every song and sort best first (stable for ties)."""
        return sorted(self.score(songs, log), key=lambda r: r.score, reverse=True)
