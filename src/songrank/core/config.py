"""Configuration schemas and loading for Song Ranker."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from songrank.core.errors import EmptyCatalogError
from songrank.models import Song
from songrank.ranking.centrality import DEFAULT_DAMPING, DEFAULT_ITERATIONS


class SongConfig(BaseModel):
    """A single catalog entry."""

    id: str
    name: str
    artist: str = ""
    spotify_id: str | None = None
    uri: str | None = None
    image_url: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Song ids cannot be empty"
            raise ValueError(msg)
        return v

    def to_song(self) -> Song:
        """Convert to the immutable value type used by the engine."""
        return Song(
            id=self.id,
            name=self.name,
            artist=self.artist,
            spotify_id=self.spotify_id,
            uri=self.uri,
            image_url=self.image_url,
        )


class ScoringConfig(BaseModel):
    """Rank centrality parameters.

    Attributes:
        damping: Weight of the random walk against uniform teleportation.
        iterations: Fixed number of power-iteration steps. There is no
            convergence threshold; the count alone bounds the work.
    """

    damping: float = Field(default=DEFAULT_DAMPING, ge=0.0, le=1.0)
    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=1)


class SessionConfig(BaseModel):
    """Complete ranking session configuration."""

    title: str = "Song Ranking"
    songs: list[SongConfig] = Field(..., min_length=1)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    seed: int | None = None
    output_dir: str = "./sessions"
    persist: bool = True

    @field_validator("songs")
    @classmethod
    def validate_unique_ids(cls, v: list[SongConfig]) -> list[SongConfig]:
        """Reject catalogs where two songs share an id."""
        seen: set[str] = set()
        for song in v:
            if song.id in seen:
                msg = f"Duplicate song id: {song.id}"
                raise ValueError(msg)
            seen.add(song.id)
        return v

    def to_songs(self) -> list[Song]:
        """Build the ordered item list for the engine."""
        return [s.to_song() for s in self.songs]


def load_config(path: str | Path) -> SessionConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated SessionConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        EmptyCatalogError: If the file defines no songs.
        ValidationError: If config is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open() as f:
        data = yaml.safe_load(f)

    if not data or not data.get("songs"):
        raise EmptyCatalogError(str(config_path))

    return SessionConfig.model_validate(data)
