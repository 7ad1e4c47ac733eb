"""Database persistence for vote records."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

from sqlmodel import Session, col, select

from songrank.models import MatchupRecord
from songrank.ranking import Matchup

from .paths import StoragePaths
from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine


class MatchupRepository(AsyncRepository):
    """Persist and replay the vote log of a session."""

    def __init__(self, engine: Engine, paths: StoragePaths) -> None:
        super().__init__(engine)
        self._paths = paths

    async def save_matchup(self, session_id: str, matchup: Matchup) -> None:
        """Save a vote to the database and the JSONL backup."""
        data = {
            "session_id": session_id,
            "sequence_index": matchup.sequence_index,
            "winner_id": matchup.winner_id,
            "loser_id": matchup.loser_id,
        }

        def _db_save(session: Session) -> None:
            session.add(MatchupRecord.model_validate(data))
            session.commit()

        await self._run_session(_db_save)

        def _save_jsonl() -> None:
            with self._paths.matchups_backup_path().open("a", encoding="utf-8") as f:
                f.write(json.dumps(data) + "\n")

        await asyncio.to_thread(_save_jsonl)

    async def load_matchups(self, session_id: str) -> list[Matchup]:
        """Load a session's votes in log order."""

        def _get(session: Session) -> list[Matchup]:
            statement = (
                select(MatchupRecord)
                .where(MatchupRecord.session_id == session_id)
                .order_by(col(MatchupRecord.sequence_index))
            )
            return [
                Matchup(
                    winner_id=r.winner_id,
                    loser_id=r.loser_id,
                    sequence_index=r.sequence_index,
                )
                for r in session.exec(statement).all()
            ]

        return await self._run_session(_get)

