"""Display ordering: reconcile the computed ranking with manual overrides.

The displayed list is built in two passes. Locked songs are pinned to their
slots first; every other song then fills the remaining slots left to right,
following the manual order when one exists and the computed ranking
otherwise.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from songrank.models import RankingItem


@dataclass(frozen=True)
class LockMap:
    """Insertion-ordered mapping of song id to pinned slot index.

    Re-locking a song moves it to the end of the insertion order. When two
    locks clamp to the same slot, the one inserted last wins.
    """

    entries: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    def get(self, song_id: str) -> int | None:
        for locked_id, slot in self.entries:
            if locked_id == song_id:
                return slot
        return None

    def with_lock(self, song_id: str, slot: int) -> LockMap:
        """Return a copy with ``song_id`` pinned to ``slot``."""
        return LockMap(self.without(song_id).entries + ((song_id, slot),))

    def without(self, song_id: str) -> LockMap:
        """Return a copy with ``song_id`` unpinned."""
        return LockMap(tuple(e for e in self.entries if e[0] != song_id))

    def __contains__(self, song_id: object) -> bool:
        return any(locked_id == song_id for locked_id, _ in self.entries)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def apply_manual_order(
    base: Sequence[RankingItem], manual_order: Sequence[str] | None
) -> list[RankingItem]:
    """Order songs by the manual order, then the rest by computed rank.

    Ids in the manual order that are unknown or repeated are skipped.

    Args:
        base: Computed ranking, best first.
        manual_order: User-requested order of song ids, or None.

    Returns:
        Every song from ``base`` exactly once.
    """
    if manual_order is None:
        return list(base)

    by_id = {item.song.id: item for item in base}
    seen: set[str] = set()
    ordered: list[RankingItem] = []
    for song_id in manual_order:
        if song_id in by_id and song_id not in seen:
            ordered.append(by_id[song_id])
            seen.add(song_id)
    ordered.extend(item for item in base if item.song.id not in seen)
    return ordered


def compose_display(
    base: Sequence[RankingItem],
    locks: LockMap,
    manual_order: Sequence[str] | None = None,
) -> list[RankingItem]:
    """Build the user-visible ranking.

    Args:
        base: Computed ranking, best first.
        locks: Pinned slots. Targets are clamped to ``[0, n - 1]``.
        manual_order: Optional user-requested relative order.

    Returns:
        Exactly one entry per song in ``base``.
    """
    n = len(base)
    if n == 0:
        return []

    by_id = {item.song.id: item for item in base}
    slots: list[RankingItem | None] = [None] * n
    # Tracked by id: two entries may carry identical scores.
    placed: set[str] = set()

    for song_id, target in locks:
        item = by_id.get(song_id)
        if item is None:
            continue
        slot = min(max(target, 0), n - 1)
        displaced = slots[slot]
        if displaced is not None:
            placed.discard(displaced.song.id)
        slots[slot] = item
        placed.add(song_id)

    cursor = 0
    for item in apply_manual_order(base, manual_order):
        if item.song.id in placed:
            continue
        while slots[cursor] is not None:
            cursor += 1
        slots[cursor] = item
        placed.add(item.song.id)

    return [item for item in slots if item is not None]


def _display_ids(displayed: Sequence[RankingItem]) -> list[str]:
    return [item.song.id for item in displayed]


def toggle_lock(
    displayed: Sequence[RankingItem],
    locks: LockMap,
    manual_order: tuple[str, ...] | None,
    song_id: str,
) -> tuple[LockMap, tuple[str, ...] | None]:
    """Lock a song at its current displayed index, or unlock it.

    Unlocking also drops the song from the manual order so it falls back to
    its computed position; other manual placements are kept.

    Returns:
        The new (locks, manual_order).
    """
    if song_id in locks:
        if manual_order is not None:
            manual_order = tuple(x for x in manual_order if x != song_id)
        return locks.without(song_id), manual_order

    ids = _display_ids(displayed)
    if song_id not in ids:
        return locks, manual_order
    return locks.with_lock(song_id, ids.index(song_id)), manual_order


def reorder(
    displayed: Sequence[RankingItem],
    manual_order: tuple[str, ...] | None,
    from_index: int,
    to_index: int,
) -> tuple[str, ...] | None:
    """Move the song at ``from_index`` to ``to_index`` (list splice).

    Indices are displayed positions. Out-of-range indices are a no-op.
    Locks are not consulted here; callers refuse drops onto locked slots.

    Returns:
        The new manual order.
    """
    n = len(displayed)
    if not (0 <= from_index < n and 0 <= to_index < n) or from_index == to_index:
        return manual_order

    order = _display_ids(displayed)
    moved = order.pop(from_index)
    order.insert(to_index, moved)
    return tuple(order)


def swap(
    displayed: Sequence[RankingItem],
    locks: LockMap,
    manual_order: tuple[str, ...] | None,
    i: int,
    j: int,
) -> tuple[str, ...] | None:
    """Exchange the songs at displayed positions ``i`` and ``j``.

    No-op if either index is out of range or either song is locked.

    Returns:
        The new manual order.
    """
    n = len(displayed)
    if not (0 <= i < n and 0 <= j < n) or i == j:
        return manual_order
    if displayed[i].song.id in locks or displayed[j].song.id in locks:
        return manual_order

    order = _display_ids(displayed)
    order[i], order[j] = order[j], order[i]
    return tuple(order)
