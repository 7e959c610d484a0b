"""Immutable parse state threaded through every parser.

Implements the immutable snapshot pattern: a parser never mutates the
state it receives, it returns a new one.

Design Philosophy:
    - ParseState is immutable (frozen dataclass)
    - One state type for both input kinds; the cursor unit follows the
      target (characters for ``str``, bits for ``bytes``)
    - Errors are values (``error`` field), not exceptions
    - Line:column computed on-demand (O(n) only for errors)

Binary Addressing:
    bit_index = byte_index * 8 + bit_offset, most significant bit first
    within each byte. A 2-byte target therefore holds bits 0..15, and bit 0
    is the top bit of the first byte.

Line Ending Support:
    Text locations use \\n as the line delimiter (LF and CRLF work;
    CR-only does not).

Python 3.13+.
"""

from dataclasses import dataclass
from typing import Any

from stateparse.constants import BITS_PER_BYTE, DEFAULT_CONTEXT_LINES, MSB_SHIFT
from stateparse.diagnostics import Diagnostic, ParseFailedError
from stateparse.diagnostics.formatter import describe_location
from stateparse.enums import InputKind

__all__ = ["LineOffsetCache", "ParseState", "Target"]

type Target = str | bytes


@dataclass(frozen=True, slots=True)
class ParseState:
    """Immutable snapshot of a parse in progress.

    Key Design Decisions:
        1. Frozen dataclass - immutability enforced by Python
        2. Slots - states are created at every step, keep them small
        3. ``target`` is always the buffer handed to ``run``
        4. ``error`` is sticky - parsers return a failed state unchanged

    Attributes:
        target: Text (``str``) or binary (``bytes``) input
        index: Cursor position (characters for text, bits for binary)
        result: Last produced value. ``None`` when absent, a scalar, or a
            ``list`` of results (the sequence variant)
        error: None while the parse is ok, the failure Diagnostic otherwise

    Example:
        >>> state = ParseState("hello")
        >>> state.index, state.result, state.is_error
        (0, None, False)
        >>> moved = state.with_result(2, "he")
        >>> state.index  # Original unchanged (immutability)
        0
        >>> moved.index, moved.result
        (2, 'he')
    """

    target: Target
    index: int = 0
    result: Any = None
    error: Diagnostic | None = None

    @property
    def is_error(self) -> bool:
        """True once a failure has been recorded."""
        return self.error is not None

    @property
    def kind(self) -> InputKind:
        """Input kind of the target."""
        match self.target:
            case str():
                return InputKind.TEXT
            case bytes():
                return InputKind.BINARY

    @property
    def length(self) -> int:
        """Target length in cursor units (characters or bits)."""
        match self.target:
            case str():
                return len(self.target)
            case bytes():
                return len(self.target) * BITS_PER_BYTE

    @property
    def is_eof(self) -> bool:
        """Check if the cursor is at or beyond the end of input."""
        return self.index >= self.length

    def slice_ahead(self, n: int) -> str:
        """Get up to n characters of text input starting at the cursor.

        Args:
            n: Number of characters to get

        Returns:
            String of up to n characters; fewer near end of input

        Raises:
            TypeError: If the target is binary
        """
        if not isinstance(self.target, str):
            msg = "slice_ahead() requires text input"
            raise TypeError(msg)
        return self.target[self.index : self.index + n]

    def read_bit(self) -> int:
        """Read the bit under the cursor (MSB first) without advancing.

        Returns:
            0 or 1

        Raises:
            TypeError: If the target is text
            IndexError: If the cursor is at or beyond the last bit
        """
        if not isinstance(self.target, bytes):
            msg = "read_bit() requires binary input"
            raise TypeError(msg)
        if self.is_eof:
            msg = f"bit index {self.index} out of range for {self.length} bits"
            raise IndexError(msg)
        byte_index, bit_offset = divmod(self.index, BITS_PER_BYTE)
        return (self.target[byte_index] >> (MSB_SHIFT - bit_offset)) & 1

    # ------------------------------------------------------------------
    # Copy construction
    # ------------------------------------------------------------------

    def with_result(self, index: int, result: Any) -> "ParseState":
        """Return a new state advanced to ``index`` holding ``result``."""
        return ParseState(self.target, index, result, self.error)

    def with_results(self, result: Any) -> "ParseState":
        """Return a new state holding ``result`` at the same index."""
        return ParseState(self.target, self.index, result, self.error)

    def with_error(self, error: Diagnostic) -> "ParseState":
        """Return a new failed state; index and result are kept."""
        return ParseState(self.target, self.index, self.result, error)

    def unwrap(self) -> Any:
        """Return the result of a successful parse.

        Raises:
            ParseFailedError: If this state carries an error
        """
        if self.error is not None:
            raise ParseFailedError(self)
        return self.result

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    def compute_line_col(self) -> tuple[int, int]:
        """Compute line and column for the cursor (text input only).

        Returns:
            (line, column) tuple (1-indexed, like text editors)

        Performance:
            O(n) where n = current position.
            Only call for error reporting, not during normal parsing!

        Example:
            >>> ParseState("line1\\nline2", 8).compute_line_col()
            (2, 3)
        """
        if not isinstance(self.target, str):
            msg = "compute_line_col() requires text input"
            raise TypeError(msg)
        line = self.target.count("\n", 0, self.index) + 1
        last_newline = self.target.rfind("\n", 0, self.index)
        col = self.index - last_newline if last_newline >= 0 else self.index + 1
        return (line, col)

    def format_error(self) -> str:
        """Format the error with its location.

        Returns:
            "line:col: message" for text input,
            "byte B, bit b: message" for binary input,
            empty string when the state is not failed

        Example:
            >>> from stateparse import run, string
            >>> run(string("ab"), "ax").format_error()
            "1:1: string: Tried to match 'ab', but got 'ax'"
        """
        if self.error is None:
            return ""
        match self.target:
            case str():
                line, col = self.compute_line_col()
                return f"{line}:{col}: {self.error.message}"
            case bytes():
                return f"{describe_location(self.index, self.target)}: {self.error.message}"

    def format_with_context(self, context_lines: int = DEFAULT_CONTEXT_LINES) -> str:
        """Format error with source context and pointer.

        Shows the failing line (text) or byte rendered in binary (binary
        input) with a caret under the failure position.

        Args:
            context_lines: Number of lines/bytes to show before/after

        Returns:
            Multi-line formatted error with context

        Example:
            >>> from stateparse import run, string
            >>> print(run(string("world"), "hello\\nwurld").format_with_context())
            1:1: string: Tried to match 'world', but got 'hello'
            <BLANKLINE>
               1 | hello
                   ^
               2 | wurld
        """
        if self.error is None:
            return ""

        match self.target:
            case str():
                line, col = self.compute_line_col()
                rows = self.target.split("\n")
            case bytes():
                byte_index, bit_offset = divmod(self.index, BITS_PER_BYTE)
                line, col = byte_index + 1, bit_offset + 1
                rows = [f"{byte:08b}" for byte in self.target]

        result_lines = [self.format_error(), ""]

        start_line = max(1, line - context_lines)
        end_line = min(len(rows), line + context_lines)
        number_offset = 1 if isinstance(self.target, str) else 0

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i - 1 + number_offset:4} | "
            result_lines.append(line_num_str + rows[i - 1])

            if i == line:
                pointer = " " * (len(line_num_str) + col - 1) + "^"
                result_lines.append(pointer)

        if line > len(rows):
            # Cursor sits past the last byte of a binary target
            result_lines.append(" " * 7 + "^ (end of input)")

        return "\n".join(result_lines)


class LineOffsetCache:
    """Cached line offset computation for efficient position lookups.

    Precomputes line start offsets in O(n) single pass, then provides
    O(log n) lookups using binary search. Used by the diagnostic formatter
    when it locates several indices in the same text.

    Example:
        >>> cache = LineOffsetCache("line1\\nline2\\nline3")
        >>> cache.get_line_col(0)
        (1, 1)
        >>> cache.get_line_col(8)
        (2, 3)

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get 1-indexed (line, column) for a character position.

        Positions outside the source are clamped to its bounds.
        """
        pos = min(max(pos, 0), self._source_len)

        # Line index = index of largest offset <= pos
        left, right = 0, len(self._offsets) - 1
        while left < right:
            mid = (left + right + 1) // 2
            if self._offsets[mid] <= pos:
                left = mid
            else:
                right = mid - 1

        return (left + 1, pos - self._offsets[left] + 1)
