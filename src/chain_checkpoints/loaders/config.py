"""
Checkpoint loader configuration constants.

Operational parameters for the hashfile and DNS discovery loaders.
"""

from __future__ import annotations

from typing import Final

from chain_checkpoints.checkpoints.network import NetworkType

DNS_TIMEOUT: Final[float] = 5.0
"""Lifetime of a single DNS TXT query in seconds, retries included."""

DNS_RECORD_SEPARATOR: Final[str] = ":"
"""Separator between the height and the hash in a TXT record."""

HASHFILE_INDENT: Final[int] = 2
"""JSON indentation used when writing a hashfile."""

MAINNET_DNS_DOMAINS: Final[tuple[str, ...]] = (
    "checkpoints.moneropulse.se",
    "checkpoints.moneropulse.org",
    "checkpoints.moneropulse.net",
    "checkpoints.moneropulse.co",
)
"""Domains publishing primary network checkpoints."""

TESTNET_DNS_DOMAINS: Final[tuple[str, ...]] = (
    "testpoints.moneropulse.se",
    "testpoints.moneropulse.org",
    "testpoints.moneropulse.net",
    "testpoints.moneropulse.co",
)
"""Domains publishing test network checkpoints."""

STAGENET_DNS_DOMAINS: Final[tuple[str, ...]] = (
    "stagenetpoints.moneropulse.se",
    "stagenetpoints.moneropulse.org",
    "stagenetpoints.moneropulse.net",
    "stagenetpoints.moneropulse.co",
)
"""Domains publishing staging network checkpoints."""

DNS_CHECKPOINT_DOMAINS: Final[dict[NetworkType, tuple[str, ...]]] = {
    NetworkType.MAINNET: MAINNET_DNS_DOMAINS,
    NetworkType.TESTNET: TESTNET_DNS_DOMAINS,
    NetworkType.STAGENET: STAGENET_DNS_DOMAINS,
}
"""DNS discovery domains indexed by network variant."""
