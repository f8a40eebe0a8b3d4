"""Checkpoint table, registry and built-in checkpoints."""

from .defaults import DEFAULT_CHECKPOINTS, DefaultCheckpoint
from .entry import CheckpointEntry, CheckResult
from .network import NetworkType
from .registry import CheckpointRegistry
from .table import CheckpointTable

__all__ = [
    "CheckpointEntry",
    "CheckpointRegistry",
    "CheckpointTable",
    "CheckResult",
    "DEFAULT_CHECKPOINTS",
    "DefaultCheckpoint",
    "NetworkType",
]
