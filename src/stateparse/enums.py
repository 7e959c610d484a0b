"""Enumerations for stateparse type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.

Python 3.13+.
"""

from enum import StrEnum

__all__ = ["InputKind"]


class InputKind(StrEnum):
    """Kind of input a ParseState is threaded through.

    StrEnum provides automatic string conversion: str(InputKind.TEXT) == "text"
    """

    TEXT = "text"
    """Text buffer; the cursor counts characters."""

    BINARY = "binary"
    """Fixed-length byte buffer; the cursor counts bits, MSB first."""
