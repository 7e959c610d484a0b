"""stateparse exception hierarchy with structured diagnostics.

Ordinary grammar failures are never raised: they travel in-band on
ParseState.error. Exceptions are reserved for conditions that must abort
the call, plus the opt-in raising helpers Parser.parse() and
ParseState.unwrap().

Python 3.13+. Zero external dependencies.
"""

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from stateparse.state import ParseState

__all__ = ["GrammarError", "ParseFailedError", "StateParseError"]


class StateParseError(Exception):
    """Base exception for all stateparse errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize StateParseError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class GrammarError(StateParseError, TypeError):
    """Grammar construction or usage bug.

    Raised, never carried in-band, because it signals a defect in how the
    grammar was built rather than bad input. Examples:
    - A contextual generator yields something that is not a Parser
    - A chain continuation returns something that is not a Parser
    - A Forward cell is invoked before being defined

    Subclasses TypeError so callers treating it as a programming error
    (the usual case) can catch it as such.
    """


class ParseFailedError(StateParseError):
    """Raised by Parser.parse() and ParseState.unwrap() on a failed parse.

    Attributes:
        state: The terminal failed ParseState
    """

    def __init__(self, state: "ParseState") -> None:
        """Initialize ParseFailedError.

        Args:
            state: Failed parse state (state.error must be set)
        """
        if state.error is None:
            msg = "ParseFailedError requires a failed ParseState"
            raise ValueError(msg)
        super().__init__(state.error)
        self.state = state
