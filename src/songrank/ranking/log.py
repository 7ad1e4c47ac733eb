"""Append-only record of pairwise votes."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from songrank.ranking.pairs import UnorderedPair


@dataclass(frozen=True)
class Matchup:
    """One recorded vote.

    Attributes:
        winner_id: Id of the preferred song.
        loser_id: Id of the other song.
        sequence_index: 0-based position in the log.
    """

    winner_id: str
    loser_id: str
    sequence_index: int

    @property
    def pair(self) -> UnorderedPair:
        return UnorderedPair.of(self.winner_id, self.loser_id)


@dataclass(frozen=True)
class MatchupLog(Sequence[Matchup]):
    """Immutable, order-preserving vote history.

    ``append`` returns a new log; existing entries are never modified.
    """

    entries: tuple[Matchup, ...] = field(default_factory=tuple)

    def append(self, winner_id: str, loser_id: str) -> MatchupLog:
        """Return a new log with one more vote at the end."""
        matchup = Matchup(winner_id=winner_id, loser_id=loser_id, sequence_index=len(self.entries))
        return MatchupLog(self.entries + (matchup,))

    def weight(self, matchup: Matchup) -> int:
        """Weight of a vote in scoring: earlier votes count more.

        The first of m votes weighs m, the last weighs 1.
        """
        return len(self.entries) - matchup.sequence_index

    def __getitem__(self, index: int) -> Matchup:  # type: ignore[override]
        return self.entries[index]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Matchup]:
        return iter(self.entries)

    @classmethod
    def from_votes(cls, votes: Sequence[tuple[str, str]]) -> MatchupLog:
        """Build a log from ordered (winner_id, loser_id) tuples."""
        log = cls()
        for winner_id, loser_id in votes:
            log = log.append(winner_id, loser_id)
        return log
