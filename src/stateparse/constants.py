"""Shared constants for stateparse.

Centralizes the few tunable values used across the state model,
primitive matchers and diagnostics. Placing them here avoids circular
imports and provides a single source of truth.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Binary addressing
    "BITS_PER_BYTE",
    "MSB_SHIFT",
    # Diagnostics
    "DEFAULT_CONTEXT_LINES",
]

# ============================================================================
# BINARY ADDRESSING
# ============================================================================

# Binary targets are addressed at bit granularity:
#   bit_index = byte_index * BITS_PER_BYTE + bit_offset
BITS_PER_BYTE: int = 8

# Bits are read most-significant first within each byte, so bit_offset 0
# lives at shift 7.
MSB_SHIFT: int = BITS_PER_BYTE - 1

# ============================================================================
# DIAGNOSTICS
# ============================================================================

# Lines of source shown above and below the failure line by
# ParseState.format_with_context().
DEFAULT_CONTEXT_LINES: int = 2
