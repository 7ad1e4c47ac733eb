"""Shared fixtures for Song Ranker tests."""

import pytest

from songrank.models import Song


@pytest.fixture
def five_songs() -> list[Song]:
    return [Song(id=i, name=f"Song {i}") for i in ("A", "B", "C", "D", "E")]
