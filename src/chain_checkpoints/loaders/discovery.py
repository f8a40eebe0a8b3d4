"""
DNS checkpoint discovery.

Checkpoints can be published as TXT records of the form `<height>:<hash>`
under a set of domains per network. Remote checkpoints are an optional
hardening layer: when the channel is unreachable or the domains disagree,
nothing is added and the node carries on with what it already has.

Agreement
---------
The default source queries every domain of the network. A record set is
only trusted when a strict majority of the queried domains returned exactly
that set. A domain that fails to resolve counts against the majority.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import Protocol

import dns.exception
import dns.resolver

from chain_checkpoints.checkpoints import CheckpointRegistry, NetworkType
from chain_checkpoints.types import Bytes32, CheckpointDecodeError, DiscoveryError, Uint64

from .config import DNS_CHECKPOINT_DOMAINS, DNS_RECORD_SEPARATOR, DNS_TIMEOUT

logger = logging.getLogger(__name__)


class TxtRecordSource(Protocol):
    """
    Anything that can fetch the agreed TXT records for a set of domains.

    Uses structural subtyping - any class with a matching `fetch` satisfies it.
    """

    def fetch(self, domains: Sequence[str]) -> list[str]:
        """
        Fetch the TXT records published under `domains`.

        Raises:
            DiscoveryError: If no trustworthy record set could be obtained.
        """
        ...


class DnsTxtRecordSource:
    """
    TXT record source backed by a dnspython resolver.

    The system resolver is only configured on first use, so a host without a
    usable resolver configuration surfaces as a `DiscoveryError` from `fetch`.
    """

    def __init__(
        self,
        timeout: float = DNS_TIMEOUT,
        resolver: dns.resolver.Resolver | None = None,
    ) -> None:
        self.timeout = timeout
        self._resolver = resolver

    @property
    def resolver(self) -> dns.resolver.Resolver:
        """
        The resolver used for queries, configured from the system on first access.

        Raises:
            DiscoveryError: If the system resolver configuration is unusable.
        """
        if self._resolver is None:
            try:
                self._resolver = dns.resolver.Resolver()
            except dns.exception.DNSException as e:
                raise DiscoveryError(f"No usable DNS resolver configuration: {e}") from e
        return self._resolver

    def query(self, domain: str) -> frozenset[str] | None:
        """
        Query the TXT records of a single domain.

        Returns:
            The set of record strings, or None if the domain did not answer.

        Raises:
            DiscoveryError: If the system resolver configuration is unusable.
        """
        resolver = self.resolver
        try:
            answer = resolver.resolve(domain, "TXT", lifetime=self.timeout)
        except dns.exception.DNSException as e:
            logger.debug(f"DNS checkpoint query failed for {domain}: {e}")
            return None

        # A TXT record may be split into several character-strings.
        return frozenset(
            b"".join(rdata.strings).decode("utf-8", errors="replace") for rdata in answer
        )

    def fetch(self, domains: Sequence[str]) -> list[str]:
        """Fetch the record set a strict majority of `domains` agree on."""
        if not domains:
            raise DiscoveryError("No DNS checkpoint domains configured")

        answers = Counter(
            records for records in (self.query(domain) for domain in domains) if records is not None
        )
        if not answers:
            raise DiscoveryError(f"None of {len(domains)} DNS checkpoint domains answered")

        records, votes = answers.most_common(1)[0]
        if votes * 2 <= len(domains):
            raise DiscoveryError(
                f"DNS checkpoint domains disagree: best record set has {votes} of "
                f"{len(domains)} votes"
            )

        return sorted(records)


def parse_checkpoint_record(record: str) -> tuple[Uint64, Bytes32] | None:
    """
    Parse a `<decimal-height>:<hex-hash>` record.

    Returns:
        The height and hash, or None if the record is malformed.
    """
    height_text, separator, hash_text = record.partition(DNS_RECORD_SEPARATOR)
    if not separator:
        return None

    try:
        return Uint64.parse(height_text), Bytes32.from_hex(hash_text)
    except CheckpointDecodeError:
        return None


def load_checkpoints_from_dns(
    registry: CheckpointRegistry,
    network: NetworkType,
    source: TxtRecordSource | None = None,
    timeout: float = DNS_TIMEOUT,
) -> bool:
    """
    Add checkpoints published over DNS for `network`.

    Malformed records are skipped one by one. A discovery failure is benign
    and reported as success. A record that conflicts with an existing pin
    stops the load and fails it.

    Args:
        registry: Registry to add checkpoints to.
        network: Selects the set of domains to query.
        source: Record source; defaults to a dnspython-backed one.
        timeout: Query lifetime for the default source.
    """
    domains = DNS_CHECKPOINT_DOMAINS[network]
    if source is None:
        source = DnsTxtRecordSource(timeout=timeout)

    try:
        records = source.fetch(domains)
    except DiscoveryError as e:
        logger.warning(f"DNS checkpoints unavailable for {network.value}: {e.message}")
        return True

    logger.info(f"Fetched {len(records)} DNS checkpoint records for {network.value}")

    for record in records:
        parsed = parse_checkpoint_record(record)
        if parsed is None:
            logger.debug(f"Skipping malformed DNS checkpoint record {record!r}")
            continue

        height, block_hash = parsed
        if not registry.add_checkpoint(height, block_hash.hex()):
            logger.error(f"Rejected DNS checkpoint at height {height}")
            return False

    return True
