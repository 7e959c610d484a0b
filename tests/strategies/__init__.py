"""Hypothesis strategies for stateparse property-based testing.

Usage:
    from tests.strategies import letter_runs, byte_buffers, bits_of
"""

from .parsing import (
    ASCII_DIGITS,
    ASCII_LETTERS,
    NON_WORD_CHARS,
    any_text,
    bits_of,
    byte_buffers,
    digit_runs,
    letter_runs,
    literals,
    non_word_text,
    shaped_text,
)

__all__ = [
    "ASCII_DIGITS",
    "ASCII_LETTERS",
    "NON_WORD_CHARS",
    "any_text",
    "bits_of",
    "byte_buffers",
    "digit_runs",
    "letter_runs",
    "literals",
    "non_word_text",
    "shaped_text",
]
