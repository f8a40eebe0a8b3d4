"""
Fixed-length byte types.

Block hashes are 32-byte digests. On the wire (hashfile, DNS records, CLI)
they travel as exactly 64 hexadecimal characters with no prefix.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, SupportsIndex

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import CheckpointDecodeError

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _coerce_to_bytes(value: Any) -> bytes:
    """
    Coerce a variety of inputs to raw bytes.

    Accepts:
      - `bytes` / `bytearray` (returned as immutable `bytes`)
      - Iterables of integers in [0, 255]

    Strings are rejected here; hex text goes through `BaseBytes.from_hex`.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        raise TypeError("use from_hex() to decode hexadecimal text")
    if isinstance(value, Iterable):
        # bytes(bytearray(iterable)) enforces each element is an int in 0..255
        return bytes(bytearray(value))
    return bytes(value)


class BaseBytes(bytes):
    """
    A base class for fixed-length byte types that inherits from `bytes`.

    Subclasses set:
      - `LENGTH`: exact number of bytes the instance must contain.
    """

    LENGTH: ClassVar[int]
    """The exact number of bytes (overridden by subclasses)."""

    def __new__(cls, value: Any = b"") -> Self:
        """
        Create and validate a new Bytes instance.

        Raises:
            ValueError: If the resulting byte length differs from `LENGTH`.
        """
        if not hasattr(cls, "LENGTH"):
            raise TypeError(f"{cls.__name__} must define LENGTH")

        b = _coerce_to_bytes(value)
        if len(b) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(b)}")
        return super().__new__(cls, b)

    @classmethod
    def from_hex(cls, text: str) -> Self:
        """
        Decode a fixed-length hexadecimal string.

        The text must hold exactly `2 * LENGTH` hex digits. A `0x` prefix,
        whitespace or separators are all rejected.

        Raises:
            CheckpointDecodeError: On wrong length or non-hex characters.
        """
        if not isinstance(text, str):
            raise CheckpointDecodeError("hash", text, "expected a string")
        if len(text) != 2 * cls.LENGTH:
            raise CheckpointDecodeError(
                "hash", text, f"expected {2 * cls.LENGTH} hex characters, got {len(text)}"
            )
        if not _HEX_DIGITS.issuperset(text):
            raise CheckpointDecodeError("hash", text, "non-hexadecimal character")
        return cls(bytes.fromhex(text))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Hook into Pydantic's validation system.

        Accepts an existing instance, raw bytes of the right length, or a hex
        string. Serializes back to the hex string form.
        """

        def validate(value: Any) -> BaseBytes:
            if isinstance(value, cls):
                return value
            if isinstance(value, str):
                return cls.from_hex(value)
            try:
                return cls(value)
            except TypeError as e:
                raise ValueError(str(e)) from e

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda x: x.hex()),
        )

    def __repr__(self) -> str:
        """Return a string representation of the bytes."""
        tname = type(self).__name__
        return f"{tname}({self.hex()})"

    def __str__(self) -> str:
        """Return the hex form used in logs and on the wire."""
        return self.hex()

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return hash((type(self), bytes(self)))

    def hex(self, sep: str | bytes | None = None, bytes_per_sep: SupportsIndex = 1) -> str:
        """Return the hexadecimal string representation of the underlying bytes."""
        return bytes(self).hex() if sep is None else bytes(self).hex(sep, bytes_per_sep)


class Bytes32(BaseBytes):
    """Fixed-size byte array of exactly 32 bytes, used for block hashes."""

    LENGTH = 32
