"""Checkpoint sources: local hashfile and DNS discovery."""

from .discovery import (
    DnsTxtRecordSource,
    TxtRecordSource,
    load_checkpoints_from_dns,
    parse_checkpoint_record,
)
from .hashfile import HashFile, HashLine, load_checkpoints_from_file, save_checkpoints_to_file
from .service import bootstrap_registry, load_new_checkpoints

__all__ = [
    "DnsTxtRecordSource",
    "HashFile",
    "HashLine",
    "TxtRecordSource",
    "bootstrap_registry",
    "load_checkpoints_from_dns",
    "load_checkpoints_from_file",
    "load_new_checkpoints",
    "parse_checkpoint_record",
    "save_checkpoints_to_file",
]
