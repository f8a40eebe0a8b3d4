"""
Local hashfile loader.

A hashfile is a JSON document listing trusted checkpoints:

    {
      "hashlines": [
        {"height": 1500000, "hash": "4f0e...c1d2"},
        {"height": 1510000, "hash": "9ab3...07ee"}
      ]
    }

Only lines above the registry's frontier (its max pinned height when loading
starts) are considered. Lines at or below it are ignored: a file can extend
the pinned set but never rewrite or back-fill it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from chain_checkpoints.checkpoints import CheckpointRegistry
from chain_checkpoints.types import Bytes32, HashfileError, StrictBaseModel, Uint64

from .config import HASHFILE_INDENT

logger = logging.getLogger(__name__)


class HashLine(StrictBaseModel):
    """One checkpoint line of a hashfile."""

    height: Uint64
    """The checkpoint height."""

    hash: Bytes32
    """The block hash at `height`, as 64 hex characters."""


class HashFile(StrictBaseModel):
    """A complete hashfile document."""

    hashlines: list[HashLine]
    """Checkpoint lines, in file order."""

    @classmethod
    def from_json(cls, content: str | bytes) -> HashFile:
        """
        Decode a hashfile document.

        Raises:
            HashfileError: If the document is not valid JSON or any line is malformed.
        """
        try:
            return cls.model_validate_json(content)
        except ValidationError as e:
            raise HashfileError(f"Malformed hashfile: {e}") from e

    @classmethod
    def from_json_file(cls, path: Path | str) -> HashFile:
        """
        Read and decode a hashfile from disk.

        Raises:
            HashfileError: If the file cannot be read or decoded.
        """
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise HashfileError(f"Cannot read hashfile {path}: {e}") from e
        return cls.from_json(content)

    def to_json(self) -> str:
        return self.model_dump_json(indent=HASHFILE_INDENT)


def load_checkpoints_from_file(registry: CheckpointRegistry, path: Path | str) -> bool:
    """
    Add checkpoints from a local hashfile.

    A missing file is not an error. A malformed document fails the load
    without touching the registry. A line rejected by the registry (a
    conflicting hash) stops the load and fails it.

    Returns:
        True if the file was absent or every considered line was pinned.
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"Blockchain checkpoints file not found: {path}")
        return True

    logger.info(f"Adding checkpoints from blockchain hashfile {path}")

    prev_max_height = registry.get_max_height()
    logger.info(f"Hard-coded max checkpoint height is {prev_max_height}")

    try:
        hashfile = HashFile.from_json_file(path)
    except HashfileError as e:
        logger.error(f"Error loading checkpoints from {path}: {e.message}")
        return False

    for line in hashfile.hashlines:
        if line.height <= prev_max_height:
            logger.debug(f"Ignoring checkpoint height {line.height}")
            continue

        logger.debug(f"Adding checkpoint height {line.height}, hash={line.hash}")
        if not registry.add_checkpoint(line.height, line.hash.hex()):
            logger.error(f"Rejected checkpoint at height {line.height} from {path}")
            return False

    return True


def save_checkpoints_to_file(registry: CheckpointRegistry, path: Path | str) -> None:
    """
    Write the registry's pinned hashes as a hashfile, ascending by height.

    Difficulty pins are not part of the hashfile format and are not written.

    Raises:
        HashfileError: If the file cannot be written.
    """
    path = Path(path)
    hashfile = HashFile(
        hashlines=[
            HashLine(height=height, hash=block_hash)
            for height, block_hash in registry.get_points().items()
        ]
    )
    try:
        path.write_text(hashfile.to_json() + "\n", encoding="utf-8")
    except OSError as e:
        raise HashfileError(f"Cannot write hashfile {path}: {e}") from e

    logger.info(f"Wrote {len(hashfile.hashlines)} checkpoints to {path}")
