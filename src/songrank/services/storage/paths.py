"""Path utilities for session storage artifacts."""

from __future__ import annotations

from pathlib import Path


class StoragePaths:
    """Build and create filesystem paths used by storage services."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def session_dir(self) -> Path:
        """Get or create the session directory."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self.base_dir

    def database_path(self) -> Path:
        return self.session_dir() / "session.duckdb"

    def matchups_backup_path(self) -> Path:
        """JSONL backup of every recorded vote."""
        return self.session_dir() / "matchups.jsonl"

    def report_path(self, filename: str) -> Path:
        """Build path to a ranking report file."""
        output_dir = self.session_dir() / "reports"
        output_dir.mkdir(exist_ok=True, parents=True)
        return output_dir / filename
