"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic carried by a failed
ParseState. Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum, StrEnum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
]


class ErrorCategory(StrEnum):
    """Error categorization derived from the DiagnosticCode range.

    Categories:
        INPUT: A primitive matcher rejected the input at the cursor
        COMBINATOR: A structural combinator could not match
        GRAMMAR: The grammar itself was constructed or used incorrectly
    """

    INPUT = "input"
    COMBINATOR = "combinator"
    GRAMMAR = "grammar"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Input errors (primitive matcher failures)
        2000-2999: Combinator errors (alternation, repetition, explicit fail)
        3000-3999: Grammar errors (construction and usage bugs, always fatal)
    """

    # Input errors (1000-1999)
    UNEXPECTED_EOF = 1001
    LITERAL_MISMATCH = 1002
    CHARACTER_CLASS_MISMATCH = 1003
    BIT_MISMATCH = 1004
    UNSUPPORTED_INPUT = 1005

    # Combinator errors (2000-2999)
    NO_ALTERNATIVE = 2001
    NO_REPETITION = 2002
    NO_SEPARATED_VALUE = 2003
    EXPLICIT_FAILURE = 2004

    # Grammar errors (3000-3999)
    NOT_A_PARSER = 3001
    INVALID_LITERAL = 3002
    INVALID_TARGET = 3003
    FORWARD_UNDEFINED = 3004
    FORWARD_REDEFINED = 3005
    EMPTY_CHOICE = 3006
    NOT_CALLABLE = 3007
    NOT_A_GENERATOR = 3008

    @property
    def category(self) -> ErrorCategory:
        """Category implied by the code's numeric range."""
        if self.value < 2000:
            return ErrorCategory.INPUT
        if self.value < 3000:
            return ErrorCategory.COMBINATOR
        return ErrorCategory.GRAMMAR


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    A failed ParseState carries exactly one Diagnostic as its error. The
    same type describes fatal grammar errors, where ``index`` is None
    because no input position is involved.

    Attributes:
        code: Unique error code
        message: Human-readable error description, prefixed with the name
            of the failing primitive or combinator
        index: Cursor position at failure (characters for text input,
            bits for binary input); None for grammar errors
        hint: Suggestion for fixing the error
        expected: What the failing matcher expected to find
        causes: Diagnostics of the attempts that led to this failure
            (one per alternative for choice)
    """

    code: DiagnosticCode
    message: str
    index: int | None = None
    hint: str | None = None
    expected: tuple[str, ...] = field(default_factory=tuple)
    causes: tuple["Diagnostic", ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    @property
    def category(self) -> ErrorCategory:
        """Error category of this diagnostic's code."""
        return self.code.category

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[LITERAL_MISMATCH]: string: Tried to match 'abc', but got 'abd'
              --> index 0
              = expected: 'abc'

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
