"""
Checkpoint registry.

The registry is the authority a validation engine consults before accepting
blocks or alternative branches:

- **check_block**: is this block the one pinned at its height?
- **is_in_checkpoint_zone**: does strict enforcement apply at this height?
- **is_alternative_block_allowed**: may a competing branch touch this height?

It is populated once at startup (built-in defaults, then a local hashfile,
then optional DNS records) and is read-mostly afterwards. It holds no lock;
concurrent writers need external synchronization.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from chain_checkpoints.types import (
    Bytes32,
    CheckpointConflictError,
    CheckpointDecodeError,
    Difficulty,
    Uint64,
    parse_difficulty,
)

from .defaults import DEFAULT_CHECKPOINTS
from .entry import CheckpointEntry, CheckResult
from .network import NetworkType
from .table import CheckpointTable

logger = logging.getLogger(__name__)


class CheckpointRegistry:
    """Pinned block hashes (and difficulties) with conflict-checked insertion."""

    def __init__(self) -> None:
        self.table = CheckpointTable()

    def __len__(self) -> int:
        return len(self.table)

    def __repr__(self) -> str:
        return f"CheckpointRegistry(points={len(self.table)}, max_height={self.get_max_height()})"

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    def get_points(self) -> Mapping[Uint64, Bytes32]:
        """Pinned hashes, ascending by height."""
        return self.table.get_points()

    def get_difficulty_points(self) -> Mapping[Uint64, Difficulty]:
        """Pinned cumulative difficulties, ascending by height."""
        return self.table.get_difficulty_points()

    def get_max_height(self) -> Uint64:
        """Greatest pinned height, or 0 when the registry is empty."""
        return self.table.get_max_height()

    def entries(self) -> list[CheckpointEntry]:
        """All pinned heights as entries, ascending by height."""
        return [
            CheckpointEntry(
                height=height,
                hash=block_hash,
                difficulty=self.table.get_difficulty(height),
            )
            for height, block_hash in self.table.get_points().items()
        ]

    # -------------------------------------------------------------------------
    # Insertion
    # -------------------------------------------------------------------------

    def add_checkpoint(self, height: int, hash_text: str, difficulty_text: str = "") -> bool:
        """
        Pin a hash (and optionally a difficulty) at `height`.

        The hash is pinned first. A bad or conflicting difficulty is reported
        as a failure but does not undo the hash pin.

        Args:
            height: Block height.
            hash_text: Block hash as exactly 64 hex characters.
            difficulty_text: Optional decimal cumulative difficulty.

        Returns:
            True if every supplied value is now pinned, False otherwise.
        """
        try:
            pinned_height = Uint64(height)
        except (OverflowError, TypeError) as e:
            logger.error(f"Invalid checkpoint height {height!r}: {e}")
            return False

        try:
            block_hash = Bytes32.from_hex(hash_text)
        except CheckpointDecodeError as e:
            logger.error(f"Failed to parse checkpoint hash at height {height}: {e}")
            return False

        try:
            self.table.pin_hash(pinned_height, block_hash)
        except CheckpointConflictError as e:
            logger.error(e.message)
            return False

        if not difficulty_text:
            return True

        difficulty = parse_difficulty(difficulty_text)
        if difficulty is None:
            logger.error(f"Failed to parse difficulty checkpoint: {difficulty_text!r}")
            return False

        try:
            self.table.pin_difficulty(pinned_height, difficulty)
        except CheckpointConflictError as e:
            logger.error(e.message)
            return False

        return True

    def init_default_checkpoints(self, network: NetworkType) -> bool:
        """
        Pin the compiled-in checkpoints for `network`.

        Returns:
            False as soon as one built-in checkpoint is rejected.
        """
        for checkpoint in DEFAULT_CHECKPOINTS[network]:
            if not self.add_checkpoint(checkpoint.height, checkpoint.hash, checkpoint.difficulty):
                logger.error(
                    f"Built-in {network.value} checkpoint at height {checkpoint.height} rejected"
                )
                return False
        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_in_checkpoint_zone(self, height: int) -> bool:
        """True iff something is pinned and `height` is at or below the highest pin."""
        return len(self.table) > 0 and Uint64(height) <= self.table.get_max_height()

    def check_block(self, height: int, block_hash: Bytes32 | str) -> CheckResult:
        """
        Check a block against the pin at its height.

        Unpinned heights are always accepted. At a pinned height the block is
        accepted only if its hash matches exactly. Hex text is decoded the same
        way as everywhere else.

        Raises:
            CheckpointDecodeError: If `block_hash` is text that is not a valid hash.
        """
        height = Uint64(height)
        if isinstance(block_hash, str):
            block_hash = Bytes32.from_hex(block_hash)
        pinned = self.table.get_hash(height)
        if pinned is None:
            return CheckResult(accepted=True, is_a_checkpoint=False)

        if pinned == block_hash:
            logger.info(f"CHECKPOINT PASSED FOR HEIGHT {height} {pinned}")
            return CheckResult(accepted=True, is_a_checkpoint=True)

        logger.warning(
            f"CHECKPOINT FAILED FOR HEIGHT {height}. "
            f"EXPECTED HASH: {pinned}, FETCHED HASH: {block_hash}"
        )
        return CheckResult(accepted=False, is_a_checkpoint=True)

    def is_alternative_block_allowed(self, blockchain_height: int, block_height: int) -> bool:
        """
        Decide whether an alternative block at `block_height` may be accepted.

        A reorganization may only touch blocks strictly above the nearest
        checkpoint at or below the current chain height. Height 0 is never
        re-writable.

        Args:
            blockchain_height: Current height of the accepted chain.
            block_height: Height of the competing block.
        """
        block_height = Uint64(block_height)
        if block_height == Uint64(0):
            return False

        checkpoint_height = self.table.floor_height(Uint64(blockchain_height))
        if checkpoint_height is None:
            # The chain has not reached the first checkpoint yet.
            return True

        return checkpoint_height < block_height

    def check_for_conflicts(self, other: CheckpointRegistry) -> bool:
        """
        Check that every height pinned by both registries has the same hash.

        Heights only pinned in `other` are ignored and nothing is copied.
        Every conflict is logged before the result is returned.
        """
        compatible = True
        for height, other_hash in other.get_points().items():
            pinned = self.table.get_hash(height)
            if pinned is not None and pinned != other_hash:
                logger.error(CheckpointConflictError("hash", height, pinned, other_hash).message)
                compatible = False
        return compatible
