"""Session storage: vote snapshots, metadata and ranking reports."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Container, Sequence
from datetime import UTC, datetime
from pathlib import Path

import structlog
import yaml
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, create_engine

from songrank import __version__
from songrank.core.config import SessionConfig
from songrank.models import RankingItem
from songrank.ranking import Matchup, Progress
from songrank.services.reporting import ranking_rows, render_csv, render_markdown

from .matchup_repository import MatchupRepository
from .paths import StoragePaths

logger = structlog.get_logger()


class SessionStore:
    """Persistence layer for one ranking session.

    Handles:
    - SQLModel-based storage of the vote log (DuckDB), with a JSONL backup
    - Config snapshot and session metadata
    - Ranking report export (Markdown, CSV, JSON)

    Locks and manual order are not stored.
    """

    def __init__(
        self,
        config: SessionConfig,
        session_id: str | None = None,
    ) -> None:
        """Initialize session store.

        Args:
            config: Session configuration.
            session_id: Optional session identifier (defaults to timestamp).
        """
        self.config = config
        self.session_id = session_id or datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
        self.base_dir = Path(config.output_dir) / self.session_id
        self.paths = StoragePaths(self.base_dir)
        self._engine = None
        self._init_directories()
        self._init_db()
        self._save_metadata()
        self.matchups = MatchupRepository(self._engine, self.paths)

    def _init_directories(self) -> None:
        """Create base output directory."""
        self.paths.session_dir()
        logger.info("store_init", session_id=self.session_id, path=str(self.base_dir))

    def _init_db(self) -> None:
        """Initialize DuckDB database and create tables."""
        db_url = f"duckdb:///{self.paths.database_path()}"
        # NullPool avoids holding the DuckDB file open between sessions
        self._engine = create_engine(db_url, poolclass=NullPool)
        SQLModel.metadata.create_all(self._engine)

    def _save_metadata(self) -> None:
        """Write the config snapshot and session metadata once, on first open."""
        config_path = self.base_dir / "config_snapshot.yaml"
        if not config_path.exists():
            with config_path.open("w") as f:
                yaml.dump(self.config.model_dump(), f, default_flow_style=False)

        metadata_path = self.base_dir / "session_metadata.json"
        if metadata_path.exists():
            return
        metadata = {
            "session_id": self.session_id,
            "title": self.config.title,
            "started_at": datetime.now(UTC).isoformat(),
            "songs": len(self.config.songs),
            "seed": self.config.seed,
            "damping": self.config.scoring.damping,
            "iterations": self.config.scoring.iterations,
            "songrank_version": __version__,
        }
        with metadata_path.open("w") as f:
            json.dump(metadata, f, indent=2)

    async def save_matchup(self, matchup: Matchup) -> None:
        """Persist one vote of this session."""
        await self.matchups.save_matchup(self.session_id, matchup)

    async def load_matchups(self) -> list[Matchup]:
        """Load this session's votes in log order."""
        return await self.matchups.load_matchups(self.session_id)

    async def save_ranking(
        self,
        ranking: Sequence[RankingItem],
        locked_ids: Container[str] = (),
        progress: Progress | None = None,
    ) -> Path:
        """Write ranking.md, ranking.csv and ranking.json.

        Returns:
            Directory holding the reports.
        """

        def _save() -> Path:
            md_path = self.paths.report_path("ranking.md")
            md_path.write_text(
                render_markdown(self.config.title, ranking, locked_ids, progress),
                encoding="utf-8",
            )

            csv_path = self.paths.report_path("ranking.csv")
            csv_path.write_text(render_csv(ranking, locked_ids), encoding="utf-8")

            json_path = self.paths.report_path("ranking.json")
            with json_path.open("w", encoding="utf-8") as f:
                json.dump(ranking_rows(ranking, locked_ids), f, indent=2)

            logger.debug("saved_ranking", path=str(md_path.parent))
            return md_path.parent

        return await asyncio.to_thread(_save)

    # ==================== Lifecycle ====================

    async def close(self) -> None:
        """Dispose of the database engine."""
        if self._engine:
            self._engine.dispose()

