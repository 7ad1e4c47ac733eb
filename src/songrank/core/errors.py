"""Custom exceptions for configuration and ranking errors."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base exception for configuration errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class EmptyCatalogError(ConfigurationError):
    """Error when a catalog defines no songs."""

    def __init__(self, config_path: str) -> None:
        super().__init__(
            f"No songs defined in {config_path}",
            "Add one entry per song under 'songs'.",
        )


class DuplicateSongError(ConfigurationError):
    """Error when two songs share an id."""

    def __init__(self, song_id: str) -> None:
        super().__init__(
            f"Duplicate song id '{song_id}'",
            "Song ids must be unique within a catalog.",
        )


class RankingError(Exception):
    """Base exception for rejected ranking commands."""


class InvalidVoteError(RankingError):
    """Error when a vote names the same song twice or an unknown song."""

    def __init__(self, winner_id: str, loser_id: str, reason: str) -> None:
        self.winner_id = winner_id
        self.loser_id = loser_id
        self.reason = reason
        super().__init__(f"Invalid vote {winner_id!r} over {loser_id!r}: {reason}")
