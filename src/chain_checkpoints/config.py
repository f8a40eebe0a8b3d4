"""
Global configuration for the checkpoint registry.

The default network comes from the environment. Everything else is read from
an optional YAML file or passed on the command line.

The expected YAML format uses UPPERCASE keys:

    NETWORK: testnet
    CHECKPOINTS_FILE: /var/lib/node/checkpoints.json
    ENABLE_DNS: false
    DNS_TIMEOUT: 5.0
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import Field

from chain_checkpoints.checkpoints.network import NetworkType
from chain_checkpoints.loaders.config import DNS_TIMEOUT
from chain_checkpoints.types import StrictBaseModel

_SUPPORTED_NETWORKS: list[str] = [network.value for network in NetworkType]

CHECKPOINTS_NETWORK = os.environ.get("CHECKPOINTS_NETWORK", "mainnet").lower()
"""The network flag ('mainnet', 'testnet' or 'stagenet'). Defaults to 'mainnet'."""

if CHECKPOINTS_NETWORK not in _SUPPORTED_NETWORKS:
    raise ValueError(
        f"Invalid CHECKPOINTS_NETWORK environment variable: '{CHECKPOINTS_NETWORK}'. "
        f"Supported values: {_SUPPORTED_NETWORKS}"
    )


class RegistryConfig(StrictBaseModel):
    """Startup settings for building the checkpoint registry."""

    network: NetworkType = Field(
        default=NetworkType(CHECKPOINTS_NETWORK), alias="NETWORK"
    )
    """Network variant selecting built-in checkpoints and DNS domains."""

    checkpoints_file: Path | None = Field(default=None, alias="CHECKPOINTS_FILE")
    """Optional local hashfile. A missing file is not an error."""

    enable_dns: bool = Field(default=False, alias="ENABLE_DNS")
    """
    Whether to query DNS for additional checkpoints.

    Off by default: remote checkpoints are an opt-in hardening layer.
    """

    dns_timeout: float = Field(default=DNS_TIMEOUT, gt=0, alias="DNS_TIMEOUT")
    """Lifetime of each DNS query in seconds."""

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> RegistryConfig:
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the data fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml(cls, content: str) -> RegistryConfig:
        """Load configuration from a YAML string."""
        data = yaml.safe_load(content)
        return cls.model_validate(data or {})
