"""Network variants."""

from enum import Enum


class NetworkType(Enum):
    """
    Mutually exclusive deployment targets.

    Each variant has its own built-in checkpoints and its own set of DNS
    discovery domains.
    """

    MAINNET = "mainnet"
    """The primary network."""

    TESTNET = "testnet"
    """The public test network."""

    STAGENET = "stagenet"
    """The staging network, mirroring mainnet rules with worthless coins."""

    @classmethod
    def from_name(cls, name: str) -> "NetworkType":
        """
        Look up a variant by its case-insensitive name.

        Raises:
            ValueError: If the name is not a supported network.
        """
        try:
            return cls(name.lower())
        except ValueError:
            supported = [n.value for n in cls]
            raise ValueError(f"Unknown network {name!r}. Supported values: {supported}") from None
