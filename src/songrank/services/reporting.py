"""Report rendering for finished or in-progress rankings."""

from __future__ import annotations

import csv
import io
from collections.abc import Container, Sequence
from typing import Any

from tabulate import tabulate

from songrank.models import RankingItem
from songrank.ranking import Progress

CSV_HEADERS = ("rank", "song_id", "name", "artist", "score", "locked")


def ranking_rows(
    ranking: Sequence[RankingItem],
    locked_ids: Container[str] = (),
) -> list[dict[str, Any]]:
    """Flatten a displayed ranking into plain rows (1-based rank)."""
    return [
        {
            "rank": i,
            "song_id": item.song.id,
            "name": item.song.name,
            "artist": item.song.artist,
            "score": item.score,
            "locked": item.song.id in locked_ids,
        }
        for i, item in enumerate(ranking, 1)
    ]


def render_markdown(
    title: str,
    ranking: Sequence[RankingItem],
    locked_ids: Container[str] = (),
    progress: Progress | None = None,
) -> str:
    """Render the ranking as a Markdown report.

    Args:
        title: Report title (markdown heading).
        ranking: Displayed ranking, best first.
        locked_ids: Ids of pinned songs, marked in the table.
        progress: Optional voting progress line below the title.

    Returns:
        Markdown report content.
    """
    rows = [
        (
            row["rank"],
            row["name"] or row["song_id"],
            row["artist"],
            f"{row['score']:.3f}",
            "yes" if row["locked"] else "",
        )
        for row in ranking_rows(ranking, locked_ids)
    ]

    lines = [f"# {title}", ""]
    if progress is not None:
        lines.extend(
            [f"Matchups completed: {progress.completed}/{progress.total}", ""]
        )
    lines.append(
        tabulate(
            rows,
            headers=("Rank", "Song", "Artist", "Score", "Locked"),
            tablefmt="github",
            disable_numparse=True,
        )
    )
    return "\n".join(lines)


def render_csv(ranking: Sequence[RankingItem], locked_ids: Container[str] = ()) -> str:
    """Render the ranking as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)
    for row in ranking_rows(ranking, locked_ids):
        writer.writerow(
            [
                row["rank"],
                row["song_id"],
                row["name"],
                row["artist"],
                f"{row['score']:.6f}",
                int(row["locked"]),
            ]
        )
    return buffer.getvalue()
