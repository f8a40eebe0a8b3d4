"""
Cumulative difficulty type.

Cumulative difficulty grows without a fixed bound over the life of a chain,
so it is an arbitrary-precision unsigned integer rather than a `BaseUint`.
"""

from __future__ import annotations

from typing import Any, SupportsInt

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self


class Difficulty(int):
    """An arbitrary-precision, non-negative cumulative difficulty value."""

    def __new__(cls, value: SupportsInt) -> Self:
        """
        Create a new Difficulty.

        Raises:
            TypeError: If `value` is a bool, float or string.
            ValueError: If `value` is negative.
        """
        if isinstance(value, (bool, float, str, bytes)):
            raise TypeError(f"Difficulty cannot be built from {type(value).__name__}")
        int_value = int(value)
        if int_value < 0:
            raise ValueError(f"Difficulty must be non-negative, got {int_value}")
        return super().__new__(cls, int_value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Accept integers or decimal strings; serialize as a decimal string."""

        def validate(value: Any) -> Difficulty:
            if isinstance(value, cls):
                return value
            if isinstance(value, str):
                parsed = parse_difficulty(value)
                if parsed is None:
                    raise ValueError(f"Invalid difficulty: {value!r}")
                return parsed
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Difficulty expects an integer, got {type(value).__name__}")
            return cls(value)

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda x: str(int(x))),
        )

    def __repr__(self) -> str:
        return f"Difficulty({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


def parse_difficulty(text: str) -> Difficulty | None:
    """
    Parse a decimal difficulty string.

    Malformed input is an expected outcome here, so the result is `None`
    instead of an exception. Only ASCII decimal digits are accepted.
    """
    if not text or not (text.isascii() and text.isdigit()):
        return None
    return Difficulty(int(text))
