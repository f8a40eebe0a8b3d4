"""Test helpers for chain_checkpoints unit tests."""

from __future__ import annotations

from .builders import make_bytes32, make_hash_hex, make_registry, write_hashfile
from .mocks import FailingRecordSource, FakeTxtRdata, StaticRecordSource

__all__ = [
    "FailingRecordSource",
    "FakeTxtRdata",
    "StaticRecordSource",
    "make_bytes32",
    "make_hash_hex",
    "make_registry",
    "write_hashfile",
]
