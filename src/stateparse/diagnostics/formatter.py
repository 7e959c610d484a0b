"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from stateparse.constants import BITS_PER_BYTE

from .codes import Diagnostic

if TYPE_CHECKING:
    from stateparse.state import LineOffsetCache

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


def describe_location(
    index: int, target: str | bytes | None, lines: LineOffsetCache | None = None
) -> str:
    """Describe a cursor position in terms a human can find in the input.

    Args:
        index: Cursor position (characters for text, bits for binary)
        target: The parsed input, or None when unknown
        lines: Precomputed line offsets of a text target, for callers
            locating several positions in the same text

    Returns:
        "line L, column C" for text, "byte B, bit b" for binary,
        "index N" when the target is unknown
    """
    match target:
        case str() if lines is not None:
            line, col = lines.get_line_col(index)
            return f"line {line}, column {col}"
        case str():
            pos = min(max(index, 0), len(target))
            line = target.count("\n", 0, pos) + 1
            col = pos - target.rfind("\n", 0, pos)
            return f"line {line}, column {col}"
        case bytes():
            byte_index, bit_offset = divmod(index, BITS_PER_BYTE)
            return f"byte {byte_index}, bit {bit_offset}"
        case None:
            return f"index {index}"


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate content to prevent overly long output
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum content length when sanitizing
        show_causes: Include nested causes (e.g. every failed choice
            alternative) in rust-style output

    Example:
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.literal_mismatch("abc", "abd", 0)
        >>> print(formatter.format(diagnostic))
        error[LITERAL_MISMATCH]: string: Tried to match 'abc', but got 'abd'
          --> index 0
          = expected: 'abc'

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        LITERAL_MISMATCH: string: Tried to match 'abc', but got 'abd'
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100
    show_causes: bool = True

    def format(self, diagnostic: Diagnostic, target: str | bytes | None = None) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format
            target: Parsed input; enables line/column (text) or byte/bit
                (binary) locations

        Returns:
            Formatted diagnostic string
        """
        return self._format_one(diagnostic, target, None)

    def format_all(
        self, diagnostics: Iterable[Diagnostic], target: str | bytes | None = None
    ) -> str:
        """Format multiple diagnostics separated by blank lines.

        Line offsets of a text target are computed once and shared by
        every diagnostic.
        """
        lines: LineOffsetCache | None = None
        if isinstance(target, str):
            from stateparse.state import LineOffsetCache  # noqa: PLC0415 - circular

            lines = LineOffsetCache(target)
        return "\n\n".join(self._format_one(d, target, lines) for d in diagnostics)

    def _format_one(
        self,
        diagnostic: Diagnostic,
        target: str | bytes | None,
        lines: LineOffsetCache | None,
    ) -> str:
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic, target, lines)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic, target, lines)

    def _format_rust(
        self,
        diagnostic: Diagnostic,
        target: str | bytes | None,
        lines: LineOffsetCache | None = None,
    ) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            error[NO_ALTERNATIVE]: choice: Unable to match with any parser at index 0
              --> line 1, column 1
              = cause: string: Tried to match 'a', but got 'x'
              = cause: string: Tried to match 'b', but got 'x'
        """
        severity = "\033[1;31merror\033[0m" if self.color else "error"
        message = self._maybe_sanitize(diagnostic.message)
        parts = [f"{severity}[{diagnostic.code.name}]: {message}"]

        if diagnostic.index is not None:
            parts.append(f"  --> {describe_location(diagnostic.index, target, lines)}")

        if diagnostic.expected:
            expected_str = ", ".join(repr(e) for e in diagnostic.expected)
            parts.append(f"  = expected: {expected_str}")

        if self.show_causes:
            for cause in diagnostic.causes:
                parts.append(f"  = cause: {self._maybe_sanitize(cause.message)}")

        if diagnostic.hint:
            parts.append(f"  = help: {self._maybe_sanitize(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            LITERAL_MISMATCH: string: Tried to match 'abc', but got 'abd'
        """
        message = self._maybe_sanitize(diagnostic.message)
        return f"{diagnostic.code.name}: {message}"

    def _format_json(
        self,
        diagnostic: Diagnostic,
        target: str | bytes | None,
        lines: LineOffsetCache | None = None,
    ) -> str:
        """Format diagnostic as JSON.

        Example output:
            {"code": "LITERAL_MISMATCH", "code_value": 1002, "message": "...", "index": 0}
        """
        data: dict[str, object] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "category": str(diagnostic.category),
            "message": self._maybe_sanitize(diagnostic.message),
        }

        if diagnostic.index is not None:
            data["index"] = diagnostic.index
            if target is not None:
                data["location"] = describe_location(diagnostic.index, target, lines)

        if diagnostic.expected:
            data["expected"] = list(diagnostic.expected)

        if diagnostic.causes:
            data["causes"] = [
                {"code": cause.code.name, "message": self._maybe_sanitize(cause.message)}
                for cause in diagnostic.causes
            ]

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled."""
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
