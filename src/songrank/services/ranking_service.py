"""Ranking service: drives the engine and keeps the vote snapshot in sync."""

from __future__ import annotations

from pathlib import Path

import structlog

from songrank.core.config import SessionConfig
from songrank.ranking import Matchup, create_scorer
from songrank.services.storage import SessionStore
from songrank.session import RankingEngine

logger = structlog.get_logger()


class RankingService:
    """Coordinates the ranking engine with optional snapshot storage.

    The engine is the source of truth for the session; the store only
    mirrors its vote log so a session can be replayed later.
    """

    def __init__(
        self,
        config: SessionConfig,
        store: SessionStore | None = None,
    ) -> None:
        """Initialize ranking service.

        Args:
            config: Session configuration (catalog and scoring parameters).
            store: Storage for vote snapshots and reports. None keeps the
                session in memory only.
        """
        self.config = config
        self.store = store
        self.engine = RankingEngine(
            config.to_songs(),
            scorer=create_scorer(config.scoring),
            seed=config.seed,
        )

    async def restore(self) -> int:
        """Replay votes previously stored for this session.

        Returns:
            Number of votes replayed.
        """
        if self.store is None:
            return 0
        matchups = await self.store.load_matchups()
        if not matchups:
            return 0
        count = self.engine.replay([(m.winner_id, m.loser_id) for m in matchups])
        logger.info(
            "snapshot_restored",
            session_id=self.store.session_id,
            votes=count,
            completed=self.engine.progress().completed,
        )
        return count

    async def vote(self, winner_id: str, loser_id: str) -> Matchup:
        """Record a vote in the engine, then persist it.

        Raises:
            InvalidVoteError: If the engine rejects the vote; nothing is stored.
        """
        matchup = self.engine.record_vote(winner_id, loser_id)
        if self.store is not None:
            await self.store.save_matchup(matchup)
        return matchup

    async def save_reports(self) -> Path | None:
        """Export the displayed ranking. Returns the report directory, if any."""
        if self.store is None:
            return None
        locked = {s.id for s in self.engine.songs if self.engine.is_locked(s.id)}
        return await self.store.save_ranking(
            self.engine.ranking_list(), locked, self.engine.progress()
        )

    async def close(self) -> None:
        if self.store is not None:
            await self.store.close()
