"""
Checkpoint table: the two ordered mappings behind the registry.

How It Works
------------
The table keeps:

1. **Hash pins**: height -> block hash
2. **Difficulty pins**: height -> cumulative difficulty
3. **Sorted heights**: ascending list of hash-pinned heights

Both mappings are kept in ascending height order so that read-only views
iterate the way callers expect. The sorted height list backs predecessor
lookups ("greatest pinned height at or below h") through `bisect`.

A pinned value is never overwritten. Offering the same value again is a
no-op; offering a different one raises `CheckpointConflictError`.
"""

from __future__ import annotations

from bisect import bisect_right, insort
from collections.abc import Mapping
from operator import itemgetter
from types import MappingProxyType
from typing import TypeVar

from chain_checkpoints.types import Bytes32, CheckpointConflictError, Difficulty, Uint64

V = TypeVar("V")


def _insert_sorted(mapping: dict[Uint64, V], height: Uint64, value: V) -> None:
    """Insert into a height-keyed dict, keeping ascending key order in place."""
    in_order = not mapping or height > next(reversed(mapping))
    mapping[height] = value
    if not in_order:
        # Re-sort in place so existing read-only proxies stay valid.
        items = sorted(mapping.items(), key=itemgetter(0))
        mapping.clear()
        mapping.update(items)


class CheckpointTable:
    """Ordered height -> hash and height -> difficulty pins."""

    def __init__(self) -> None:
        self._points: dict[Uint64, Bytes32] = {}
        self._difficulty_points: dict[Uint64, Difficulty] = {}
        self._heights: list[Uint64] = []

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, height: object) -> bool:
        """True if a hash is pinned at `height` (a `Uint64` or plain `int`)."""
        if isinstance(height, bool) or not isinstance(height, int):
            return False
        try:
            return Uint64(height) in self._points
        except OverflowError:
            return False

    def get_points(self) -> Mapping[Uint64, Bytes32]:
        """Read-only view of height -> hash pins, ascending by height."""
        return MappingProxyType(self._points)

    def get_difficulty_points(self) -> Mapping[Uint64, Difficulty]:
        """Read-only view of height -> difficulty pins, ascending by height."""
        return MappingProxyType(self._difficulty_points)

    def get_max_height(self) -> Uint64:
        """Greatest pinned height, or 0 when nothing is pinned."""
        if not self._heights:
            return Uint64(0)
        return self._heights[-1]

    def get_hash(self, height: Uint64) -> Bytes32 | None:
        return self._points.get(height)

    def get_difficulty(self, height: Uint64) -> Difficulty | None:
        return self._difficulty_points.get(height)

    def floor_height(self, height: Uint64) -> Uint64 | None:
        """
        Find the greatest pinned height that is `<= height`.

        Returns:
            The pinned height, or None if `height` lies below the first pin.
        """
        index = bisect_right(self._heights, height)
        if index == 0:
            return None
        return self._heights[index - 1]

    def pin_hash(self, height: Uint64, block_hash: Bytes32) -> None:
        """
        Pin `block_hash` at `height`.

        Raises:
            CheckpointConflictError: If a different hash is already pinned.
        """
        pinned = self._points.get(height)
        if pinned is not None:
            if pinned != block_hash:
                raise CheckpointConflictError("hash", height, pinned, block_hash)
            return

        _insert_sorted(self._points, height, block_hash)
        insort(self._heights, height)

    def pin_difficulty(self, height: Uint64, difficulty: Difficulty) -> None:
        """
        Pin the expected cumulative difficulty at `height`.

        Raises:
            CheckpointConflictError: If a different difficulty is already pinned.
        """
        pinned = self._difficulty_points.get(height)
        if pinned is not None:
            if pinned != difficulty:
                raise CheckpointConflictError("difficulty", height, pinned, difficulty)
            return

        _insert_sorted(self._difficulty_points, height, difficulty)
