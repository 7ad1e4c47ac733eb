"""Ranking session state and command reducers.

A session is an immutable :class:`SessionState`. Each command is a pure
function from one state to the next; :class:`RankingEngine` owns the current
state for a single caller and recomputes the displayed ranking after every
command.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

import structlog

from songrank.core.errors import DuplicateSongError, InvalidVoteError
from songrank.models import RankingItem, Song
from songrank.ranking import (
    LockMap,
    Matchup,
    MatchupLog,
    Progress,
    RankCentrality,
    Scorer,
    UnorderedPair,
    all_pairs,
    compose_display,
    next_pair,
    progress,
)
from songrank.ranking import display as composer

logger = structlog.get_logger()


@dataclass(frozen=True)
class SessionState:
    """Snapshot of a ranking session.

    Attributes:
        songs: Active songs in catalog order.
        pairs: Every unordered pair of active songs.
        log: Vote history.
        played: Pairs resolved by at least one vote.
        locks: Pinned display slots.
        manual_order: User-requested order of song ids, or None.
    """

    songs: tuple[Song, ...] = ()
    pairs: frozenset[UnorderedPair] = frozenset()
    log: MatchupLog = field(default_factory=MatchupLog)
    played: frozenset[UnorderedPair] = frozenset()
    locks: LockMap = field(default_factory=LockMap)
    manual_order: tuple[str, ...] | None = None

    @property
    def song_ids(self) -> list[str]:
        return [s.id for s in self.songs]

    def song(self, song_id: str) -> Song | None:
        """Look up an active song by id."""
        for s in self.songs:
            if s.id == song_id:
                return s
        return None


def new_session(songs: Iterable[Song]) -> SessionState:
    """Start a session over a fresh item set.

    Votes, played pairs, locks and manual order all start empty.

    Raises:
        DuplicateSongError: If two songs share an id.
    """
    songs = tuple(songs)
    seen: set[str] = set()
    for song in songs:
        if song.id in seen:
            raise DuplicateSongError(song.id)
        seen.add(song.id)
    return SessionState(songs=songs, pairs=all_pairs(s.id for s in songs))


def apply_vote(state: SessionState, winner_id: str, loser_id: str) -> SessionState:
    """Record that ``winner_id`` was preferred over ``loser_id``.

    Raises:
        InvalidVoteError: If the ids are equal or not both active songs.
            The state is left untouched.
    """
    if winner_id == loser_id:
        raise InvalidVoteError(winner_id, loser_id, "a song cannot beat itself")
    known = set(state.song_ids)
    for song_id in (winner_id, loser_id):
        if song_id not in known:
            raise InvalidVoteError(winner_id, loser_id, f"unknown song id {song_id!r}")

    log = state.log.append(winner_id, loser_id)
    return replace(state, log=log, played=state.played | {log[-1].pair})


def base_ranking(state: SessionState, scorer: Scorer) -> list[RankingItem]:
    """Computed ranking, best first, ignoring locks and manual order."""
    return scorer.rank(state.songs, state.log)


def displayed_ranking(state: SessionState, scorer: Scorer) -> list[RankingItem]:
    """Ranking as shown to the user: locks and manual order applied."""
    return compose_display(base_ranking(state, scorer), state.locks, state.manual_order)


def apply_toggle_lock(state: SessionState, song_id: str, scorer: Scorer) -> SessionState:
    """Pin a song at its current displayed index, or release it."""
    locks, manual_order = composer.toggle_lock(
        displayed_ranking(state, scorer), state.locks, state.manual_order, song_id
    )
    return replace(state, locks=locks, manual_order=manual_order)


def apply_reorder(
    state: SessionState, from_index: int, to_index: int, scorer: Scorer
) -> SessionState:
    """Move the song at one displayed position to another."""
    manual_order = composer.reorder(
        displayed_ranking(state, scorer), state.manual_order, from_index, to_index
    )
    return replace(state, manual_order=manual_order)


def apply_swap(state: SessionState, i: int, j: int, scorer: Scorer) -> SessionState:
    """Exchange two unlocked songs in the displayed ranking."""
    manual_order = composer.swap(
        displayed_ranking(state, scorer), state.locks, state.manual_order, i, j
    )
    return replace(state, manual_order=manual_order)


class RankingEngine:
    """Single-owner controller for one ranking session.

    Commands are processed one at a time; the displayed ranking is fully
    recomputed after each of them. Callers that share an engine must
    serialize their commands.
    """

    def __init__(
        self,
        songs: Iterable[Song] = (),
        scorer: Scorer | None = None,
        seed: int | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            songs: Initial item set.
            scorer: Scoring algorithm; rank centrality with defaults if omitted.
            seed: Seed for next-pair sampling. None for nondeterministic.
        """
        self.scorer = scorer or RankCentrality()
        self._rng = random.Random(seed)  # noqa: S311
        self._state = new_session(songs)
        self._ranking = displayed_ranking(self._state, self.scorer)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def songs(self) -> tuple[Song, ...]:
        return self._state.songs

    @property
    def matchups(self) -> MatchupLog:
        return self._state.log

    def _commit(self, state: SessionState) -> None:
        self._state = state
        self._ranking = displayed_ranking(state, self.scorer)

    def replace_items(self, songs: Iterable[Song]) -> None:
        """Swap in a new item set, discarding all session state."""
        self._commit(new_session(songs))
        logger.info("session_reset", songs=len(self._state.songs))

    def current_pair(self) -> tuple[Song, Song] | None:
        """Sample an unresolved pair, in catalog order.

        Returns:
            Two songs to compare, or None when every pair has been voted on.
        """
        pair = next_pair(self._state.pairs, self._state.played, rng=self._rng)
        if pair is None:
            return None
        ids = self._state.song_ids
        a, b = sorted(pair, key=ids.index)
        return self._state.song(a), self._state.song(b)  # type: ignore[return-value]

    def record_vote(self, winner_id: str, loser_id: str) -> Matchup:
        """Append a vote and recompute the ranking.

        Raises:
            InvalidVoteError: If the vote is rejected.
        """
        try:
            state = apply_vote(self._state, winner_id, loser_id)
        except InvalidVoteError as e:
            logger.warning("invalid_vote", winner=winner_id, loser=loser_id, reason=e.reason)
            raise
        self._commit(state)
        matchup = state.log[-1]
        logger.debug(
            "vote_recorded",
            winner=winner_id,
            loser=loser_id,
            sequence_index=matchup.sequence_index,
        )
        return matchup

    def replay(self, votes: Sequence[tuple[str, str]]) -> int:
        """Re-apply stored votes in order, recomputing once at the end.

        Args:
            votes: Ordered (winner_id, loser_id) tuples.

        Returns:
            Number of votes applied.

        Raises:
            InvalidVoteError: If any vote does not fit the active item set.
        """
        state = self._state
        for winner_id, loser_id in votes:
            state = apply_vote(state, winner_id, loser_id)
        self._commit(state)
        logger.info("session_replayed", votes=len(votes))
        return len(votes)

    def ranking_list(self) -> list[RankingItem]:
        """Displayed ranking: one entry per song."""
        return list(self._ranking)

    def scores(self) -> dict[str, float]:
        """Computed score per song id."""
        return {item.song.id: item.score for item in self._ranking}

    def progress(self) -> Progress:
        return progress(self._state.played, self._state.pairs)

    @property
    def is_complete(self) -> bool:
        return self.progress().remaining == 0

    def is_locked(self, song_id: str) -> bool:
        return song_id in self._state.locks

    def toggle_lock(self, song_id: str) -> None:
        """Lock a song where it is displayed now, or unlock it."""
        self._commit(apply_toggle_lock(self._state, song_id, self.scorer))
        logger.debug("lock_toggled", song=song_id, locked=self.is_locked(song_id))

    def _locked_at(self, index: int) -> bool:
        if not 0 <= index < len(self._ranking):
            return False
        return self.is_locked(self._ranking[index].song.id)

    def can_reorder(self, from_index: int, to_index: int) -> bool:
        """Whether a drag from one displayed position to another is allowed.

        A drag cannot start on a locked song or drop onto a locked slot.
        """
        n = len(self._ranking)
        if not (0 <= from_index < n and 0 <= to_index < n) or from_index == to_index:
            return False
        return not (self._locked_at(from_index) or self._locked_at(to_index))

    def can_swap(self, i: int, j: int) -> bool:
        """Whether two displayed positions may be exchanged."""
        n = len(self._ranking)
        if not (0 <= i < n and 0 <= j < n) or i == j:
            return False
        return not (self._locked_at(i) or self._locked_at(j))

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move a song between displayed positions. Locks are not checked."""
        self._commit(apply_reorder(self._state, from_index, to_index, self.scorer))
        logger.debug("reordered", from_index=from_index, to_index=to_index)

    def swap(self, i: int, j: int) -> None:
        """Exchange two displayed positions; no-op if either song is locked."""
        self._commit(apply_swap(self._state, i, j, self.scorer))
        logger.debug("swapped", i=i, j=j)
