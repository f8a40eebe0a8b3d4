"""Checkpoint records exchanged between the registry and its callers."""

from __future__ import annotations

from typing import NamedTuple

from chain_checkpoints.types import Bytes32, Difficulty, StrictBaseModel, Uint64


class CheckpointEntry(StrictBaseModel):
    """A single pinned height with its hash and optional cumulative difficulty."""

    height: Uint64
    """The pinned block height."""

    hash: Bytes32
    """The block hash required at `height`."""

    difficulty: Difficulty | None = None
    """Expected cumulative difficulty at `height`, when one is pinned."""


class CheckResult(NamedTuple):
    """
    Outcome of checking a block against the pinned set.

    `accepted` is False only when the height is pinned and the hash differs.
    """

    accepted: bool
    """Whether the block may be accepted as far as checkpoints are concerned."""

    is_a_checkpoint: bool
    """Whether the block height is pinned at all."""
