"""
Checkpoint registry CLI entry point.

Build the checkpoint registry for a network exactly as a node would at
startup, print the pinned set, and optionally check blocks against it.

Usage::

    python -m chain_checkpoints --network testnet
    python -m chain_checkpoints --checkpoints-file checkpoints.json --enable-dns
    python -m chain_checkpoints --check 1000:bc6458452fd0575a314089bf302f6fd68ebaa2d689c42f3365293b96bbdf1f25
    python -m chain_checkpoints --config registry.yaml --export pinned.json

Options:
    --network           Network variant (mainnet, testnet, stagenet)
    --config            Path to a registry YAML file
    --checkpoints-file  Path to a local JSON hashfile
    --enable-dns        Also load checkpoints published over DNS
    --dns-timeout       DNS query lifetime in seconds
    --check             HEIGHT:HASH to check against the registry (repeatable)
    --export            Write the resulting checkpoints as a hashfile
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from chain_checkpoints.checkpoints import CheckpointRegistry, NetworkType
from chain_checkpoints.config import RegistryConfig
from chain_checkpoints.loaders import (
    bootstrap_registry,
    parse_checkpoint_record,
    save_checkpoints_to_file,
)
from chain_checkpoints.types import Bytes32, CheckpointRegistryError, Uint64

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def parse_check_argument(value: str) -> tuple[Uint64, Bytes32]:
    """Parse a `HEIGHT:HASH` command line argument."""
    parsed = parse_checkpoint_record(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(
            f"expected HEIGHT:HASH with a 64 character hex hash, got {value!r}"
        )
    return parsed


def build_config(args: argparse.Namespace) -> RegistryConfig:
    """
    Combine the optional YAML file with command line overrides.

    Command line flags win over the file; the file wins over defaults.
    """
    config = RegistryConfig.from_yaml_file(args.config) if args.config else RegistryConfig()

    overrides: dict[str, Any] = {}
    if args.network is not None:
        overrides["network"] = NetworkType.from_name(args.network)
    if args.checkpoints_file is not None:
        overrides["checkpoints_file"] = args.checkpoints_file
    if args.enable_dns:
        overrides["enable_dns"] = True
    if args.dns_timeout is not None:
        overrides["dns_timeout"] = args.dns_timeout

    return config.copy(**overrides) if overrides else config


def print_registry(registry: CheckpointRegistry) -> None:
    """Print every pinned height with its hash and difficulty."""
    for entry in registry.entries():
        difficulty = "-" if entry.difficulty is None else str(entry.difficulty)
        print(f"{int(entry.height):>10}  {entry.hash}  {difficulty}")
    print(f"max height: {registry.get_max_height()}")


def run(args: argparse.Namespace) -> int:
    """
    Build the registry and perform the requested actions.

    Returns:
        Process exit status: 0 on success, 1 on failure.
    """
    config = build_config(args)

    try:
        registry = bootstrap_registry(config)
    except CheckpointRegistryError as e:
        logger.error(f"Cannot build checkpoint registry: {e.message}")
        return 1

    print_registry(registry)

    status = 0
    for height, block_hash in args.checks:
        result = registry.check_block(height, block_hash)
        if not result.accepted:
            verdict = "REJECTED"
            status = 1
        elif result.is_a_checkpoint:
            verdict = "PASSED"
        else:
            verdict = "NOT A CHECKPOINT"
        print(f"check {height}:{block_hash} {verdict}")

    if args.export is not None:
        try:
            save_checkpoints_to_file(registry, args.export)
        except CheckpointRegistryError as e:
            logger.error(e.message)
            return 1

    return status


def create_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description="Trusted checkpoint registry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--network",
        choices=[network.value for network in NetworkType],
        default=None,
        help="Network variant (default: CHECKPOINTS_NETWORK or mainnet)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a registry YAML file",
    )
    parser.add_argument(
        "--checkpoints-file",
        type=Path,
        default=None,
        help="Path to a local JSON hashfile",
    )
    parser.add_argument(
        "--enable-dns",
        action="store_true",
        help="Also load checkpoints published over DNS",
    )
    parser.add_argument(
        "--dns-timeout",
        type=float,
        default=None,
        help="DNS query lifetime in seconds",
    )
    parser.add_argument(
        "--check",
        action="append",
        type=parse_check_argument,
        default=[],
        dest="checks",
        metavar="HEIGHT:HASH",
        help="Check a block hash against the registry (can be repeated)",
    )
    parser.add_argument(
        "--export",
        type=Path,
        default=None,
        help="Write the resulting checkpoints as a hashfile",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = create_parser().parse_args(argv)
    setup_logging(args.verbose, args.no_color)
    raise SystemExit(run(args))


if __name__ == "__main__":
    main()
