"""Candidate pair enumeration and random next-pair selection."""

from __future__ import annotations

import random
from collections.abc import Collection, Iterable, Iterator
from dataclasses import dataclass
from itertools import combinations


@dataclass(frozen=True)
class UnorderedPair:
    """A 2-combination of song ids. ``UnorderedPair.of(a, b) == UnorderedPair.of(b, a)``.

    Attributes:
        first: Lexicographically smaller id.
        second: Lexicographically larger id.
    """

    first: str
    second: str

    @classmethod
    def of(cls, a: str, b: str) -> UnorderedPair:
        """Build a normalized pair from two distinct ids."""
        if a == b:
            msg = f"A pair needs two distinct ids, got {a!r} twice"
            raise ValueError(msg)
        return cls(a, b) if a < b else cls(b, a)

    def __contains__(self, song_id: object) -> bool:
        return song_id in (self.first, self.second)

    def __iter__(self) -> Iterator[str]:
        yield self.first
        yield self.second


@dataclass(frozen=True)
class Progress:
    """Voting progress over the pair universe."""

    completed: int
    total: int

    @property
    def remaining(self) -> int:
        return self.total - self.completed

    @property
    def fraction(self) -> float:
        """Share of resolved pairs; 1.0 when nothing is left to vote on."""
        if self.total == 0:
            return 1.0
        return self.completed / self.total


def all_pairs(song_ids: Iterable[str]) -> frozenset[UnorderedPair]:
    """Enumerate every unordered pair of the given ids.

    Args:
        song_ids: Unique song identifiers.

    Returns:
        Exactly n*(n-1)/2 pairs, no self-pairs.
    """
    return frozenset(UnorderedPair.of(a, b) for a, b in combinations(song_ids, 2))


def unplayed_pairs(
    pairs: Collection[UnorderedPair], played: Collection[UnorderedPair]
) -> list[UnorderedPair]:
    """Return the unresolved pairs in a stable order."""
    return sorted((p for p in pairs if p not in played), key=lambda p: (p.first, p.second))


def next_pair(
    pairs: Collection[UnorderedPair],
    played: Collection[UnorderedPair],
    rng: random.Random | None = None,
) -> UnorderedPair | None:
    """Pick an unresolved pair uniformly at random.

    Every call samples again, so two calls on the same state may disagree.

    Args:
        pairs: The full pair universe.
        played: Pairs already resolved by a vote.
        rng: Optional random source; the module RNG is used if omitted.

    Returns:
        An unplayed pair, or None when every pair has been voted on.
    """
    remaining = unplayed_pairs(pairs, played)
    if not remaining:
        return None
    chooser = rng or random
    return chooser.choice(remaining)


def progress(played: Collection[UnorderedPair], pairs: Collection[UnorderedPair]) -> Progress:
    """Count resolved pairs against the universe."""
    completed = sum(1 for p in played if p in pairs)
    return Progress(completed=completed, total=len(pairs))
