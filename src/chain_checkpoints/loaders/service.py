"""
Checkpoint loading sequence.

Sources are applied in a fixed order:

1. Built-in checkpoints for the network
2. The local hashfile (only heights above the built-in frontier)
3. DNS records, when enabled

Later sources can only add pins; a conflicting value is rejected by the
registry and reported as a failed load.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from chain_checkpoints.checkpoints import CheckpointRegistry, NetworkType
from chain_checkpoints.types import CheckpointRegistryError

from .config import DNS_TIMEOUT
from .discovery import TxtRecordSource, load_checkpoints_from_dns
from .hashfile import load_checkpoints_from_file

if TYPE_CHECKING:
    from chain_checkpoints.config import RegistryConfig

logger = logging.getLogger(__name__)


def load_new_checkpoints(
    registry: CheckpointRegistry,
    path: Path | str | None,
    network: NetworkType,
    enable_dns: bool,
    source: TxtRecordSource | None = None,
    dns_timeout: float = DNS_TIMEOUT,
) -> bool:
    """
    Load checkpoints from the hashfile and, if enabled, from DNS.

    Both loaders always run; the result is True only if both succeeded.
    A `path` of None means no hashfile is configured.
    """
    result = True
    if path is not None:
        result = load_checkpoints_from_file(registry, path)

    if enable_dns:
        result &= load_checkpoints_from_dns(registry, network, source=source, timeout=dns_timeout)

    return result


def bootstrap_registry(
    config: RegistryConfig,
    source: TxtRecordSource | None = None,
) -> CheckpointRegistry:
    """
    Build a registry from built-in checkpoints and the configured sources.

    Failures of the optional sources are logged and whatever was accepted is
    kept.

    Raises:
        CheckpointRegistryError: If the built-in checkpoints cannot be pinned.
    """
    registry = CheckpointRegistry()
    if not registry.init_default_checkpoints(config.network):
        raise CheckpointRegistryError(
            f"Built-in checkpoints for {config.network.value} are inconsistent"
        )

    logger.info(
        f"Pinned {len(registry)} built-in {config.network.value} checkpoints "
        f"up to height {registry.get_max_height()}"
    )

    loaded = load_new_checkpoints(
        registry,
        config.checkpoints_file,
        config.network,
        config.enable_dns,
        source=source,
        dns_timeout=config.dns_timeout,
    )
    if not loaded:
        logger.warning("Some checkpoints could not be loaded; continuing with accepted ones")

    logger.info(f"Checkpoint registry ready: {registry!r}")
    return registry
