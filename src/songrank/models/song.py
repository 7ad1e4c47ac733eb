"""Song and ranking entry value types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Song:
    """A rankable item.

    Only ``id`` matters to the ranking engine; the rest is display metadata.

    Attributes:
        id: Unique identifier within the active catalog.
        name: Track title.
        artist: Performing artist(s).
        spotify_id: Optional Spotify track id.
        uri: Optional playback URI.
        image_url: Optional album art URL.
    """

    id: str
    name: str = ""
    artist: str = ""
    spotify_id: str | None = None
    uri: str | None = None
    image_url: str | None = None

    @property
    def label(self) -> str:
        """Human-readable "name - artist" label."""
        if self.artist:
            return f"{self.name} - {self.artist}"
        return self.name or self.id


@dataclass(frozen=True)
class RankingItem:
    """A song paired with its rank centrality score."""

    song: Song
    score: float
