"""Exception hierarchy for the checkpoint registry."""

from __future__ import annotations

from typing import Any


class CheckpointRegistryError(Exception):
    """
    Base exception for all checkpoint-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class CheckpointDecodeError(CheckpointRegistryError, ValueError):
    """
    Raised when a height, hash or record cannot be decoded.

    Also a `ValueError`, so pydantic validators report it as a validation error.

    Attributes:
        field: Name of the field being decoded.
        value: The offending input (truncated for display).
    """

    def __init__(self, field: str, value: Any, detail: str | None = None) -> None:
        self.field = field
        self.value = value

        value_repr = repr(value)
        if len(value_repr) > 80:
            value_repr = value_repr[:77] + "..."

        msg = f"Invalid {field}: {value_repr}"
        if detail:
            msg = f"{msg} ({detail})"

        super().__init__(msg)


class CheckpointConflictError(CheckpointRegistryError):
    """
    Raised when a different value is offered for an already pinned height.

    Pinned values are never overwritten.

    Attributes:
        kind: Which table rejected the value ("hash" or "difficulty").
        height: The pinned height.
        pinned: The value already stored.
        offered: The rejected value.
    """

    def __init__(self, kind: str, height: int, pinned: Any, offered: Any) -> None:
        self.kind = kind
        self.height = height
        self.pinned = pinned
        self.offered = offered

        super().__init__(
            f"{kind.capitalize()} checkpoint at height {height} already exists "
            f"with a different value (pinned {pinned!s}, offered {offered!s})"
        )


class HashfileError(CheckpointRegistryError):
    """Raised when the local checkpoint document cannot be read or decoded."""


class DiscoveryError(CheckpointRegistryError):
    """Raised when the remote checkpoint discovery channel fails."""
