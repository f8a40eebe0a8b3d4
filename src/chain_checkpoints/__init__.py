"""
Trusted checkpoint registry for a blockchain node.

Pins block hashes (and optionally cumulative difficulties) at fixed heights,
and answers whether blocks and alternative branches are compatible with them.
"""

from .checkpoints import CheckpointRegistry, CheckResult, NetworkType

__all__ = ["CheckpointRegistry", "CheckResult", "NetworkType"]
