"""Reusable type definitions for the checkpoint registry."""

from .base import StrictBaseModel
from .byte_arrays import BaseBytes, Bytes32
from .difficulty import Difficulty, parse_difficulty
from .exceptions import (
    CheckpointConflictError,
    CheckpointDecodeError,
    CheckpointRegistryError,
    DiscoveryError,
    HashfileError,
)
from .uint import BaseUint, Uint64

__all__ = [
    # Core types
    "Uint64",
    "BaseUint",
    "Bytes32",
    "BaseBytes",
    "Difficulty",
    "parse_difficulty",
    "StrictBaseModel",
    # Exceptions
    "CheckpointRegistryError",
    "CheckpointDecodeError",
    "CheckpointConflictError",
    "HashfileError",
    "DiscoveryError",
]
