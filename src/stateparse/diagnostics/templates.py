"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import replace

from stateparse.constants import BITS_PER_BYTE

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Every in-band failure message starts with the name of the primitive or
    combinator that produced it, so a failure read out of a deeply composed
    grammar still names its origin.
    """

    # =========================================================================
    # Input errors
    # =========================================================================

    @staticmethod
    def unexpected_eof(name: str, index: int, expected: str | None = None) -> Diagnostic:
        """Matcher reached the end of input.

        Args:
            name: Name of the failing primitive
            index: Cursor position
            expected: What the matcher wanted to read (optional)

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        if expected is None:
            msg = f"{name}: Got unexpected end of input at index {index}"
            return Diagnostic(code=DiagnosticCode.UNEXPECTED_EOF, message=msg, index=index)
        msg = f"{name}: Tried to match {expected!r}, but got end of input"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=msg,
            index=index,
            expected=(expected,),
        )

    @staticmethod
    def literal_mismatch(literal: str, found: str, index: int) -> Diagnostic:
        """Literal matcher found different text.

        Args:
            literal: The literal that was expected
            found: The slice of input found at the cursor
            index: Cursor position

        Returns:
            Diagnostic for LITERAL_MISMATCH
        """
        msg = f"string: Tried to match {literal!r}, but got {found!r}"
        return Diagnostic(
            code=DiagnosticCode.LITERAL_MISMATCH,
            message=msg,
            index=index,
            expected=(literal,),
        )

    @staticmethod
    def character_class_mismatch(name: str, char_class: str, index: int) -> Diagnostic:
        """Character-class matcher matched zero characters.

        Args:
            name: Name of the failing primitive (letters, digits)
            char_class: Human-readable class, e.g. "A-Z, a-z"
            index: Cursor position

        Returns:
            Diagnostic for CHARACTER_CLASS_MISMATCH
        """
        msg = f"{name}: Couldn't match {name} at index {index}"
        return Diagnostic(
            code=DiagnosticCode.CHARACTER_CLASS_MISMATCH,
            message=msg,
            index=index,
            expected=(char_class,),
        )

    @staticmethod
    def bit_mismatch(name: str, expected: int, actual: int, index: int) -> Diagnostic:
        """Constrained bit matcher read the other bit value."""
        msg = f"{name}: Expected a {expected}, but got a {actual} at index {index}"
        return Diagnostic(
            code=DiagnosticCode.BIT_MISMATCH,
            message=msg,
            index=index,
            expected=(str(expected),),
        )

    @staticmethod
    def bit_out_of_range(name: str, index: int, bit_length: int) -> Diagnostic:
        """Bit matcher cursor is at or beyond the end of the buffer."""
        byte_index, bit_offset = divmod(index, BITS_PER_BYTE)
        msg = (
            f"{name}: Unexpected end of input at index {index} "
            f"(byte {byte_index}, bit {bit_offset}; buffer holds {bit_length} bits)"
        )
        return Diagnostic(code=DiagnosticCode.UNEXPECTED_EOF, message=msg, index=index)

    @staticmethod
    def unsupported_input(
        name: str, expected_kind: str, actual_kind: str, index: int
    ) -> Diagnostic:
        """Primitive applied to an input kind it cannot read.

        Args:
            name: Name of the failing primitive
            expected_kind: Input kind the primitive reads
            actual_kind: Input kind of the target

        Returns:
            Diagnostic for UNSUPPORTED_INPUT
        """
        msg = (
            f"{name}: Tried to match against {actual_kind} input, "
            f"but {name} requires {expected_kind} input"
        )
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_INPUT,
            message=msg,
            index=index,
            hint=f"Use {name} only in grammars run over {expected_kind} input",
        )

    # =========================================================================
    # Combinator errors
    # =========================================================================

    @staticmethod
    def in_sequence(inner: Diagnostic) -> Diagnostic:
        """Failed sequence_of step, message prefixed with the combinator name.

        Code, index and expectations of the failing step are kept.
        """
        return replace(inner, message=f"sequence_of: {inner.message}")

    @staticmethod
    def in_between(inner: Diagnostic) -> Diagnostic:
        """Failed between() part, message prefixed with the combinator name."""
        return replace(inner, message=f"between: {inner.message}")

    @staticmethod
    def remessage(diagnostic: Diagnostic, message: str) -> Diagnostic:
        """Same failure under a message produced by error_map()."""
        return replace(diagnostic, message=message)

    @staticmethod
    def no_alternative(index: int, causes: tuple[Diagnostic, ...]) -> Diagnostic:
        """Every alternative of a choice failed.

        Args:
            index: Position where all alternatives were attempted
            causes: Diagnostic of each failed alternative, in order

        Returns:
            Diagnostic for NO_ALTERNATIVE
        """
        msg = f"choice: Unable to match with any parser at index {index}"
        return Diagnostic(
            code=DiagnosticCode.NO_ALTERNATIVE,
            message=msg,
            index=index,
            causes=causes,
        )

    @staticmethod
    def no_repetition(index: int, cause: Diagnostic | None) -> Diagnostic:
        """many1 matched zero times."""
        msg = f"many1: Unable to match any input using parser at index {index}"
        return Diagnostic(
            code=DiagnosticCode.NO_REPETITION,
            message=msg,
            index=index,
            causes=() if cause is None else (cause,),
        )

    @staticmethod
    def no_separated_value(index: int, cause: Diagnostic | None) -> Diagnostic:
        """sep_by1 collected zero values."""
        msg = f"sep_by1: Unable to parse any results at index {index}"
        return Diagnostic(
            code=DiagnosticCode.NO_SEPARATED_VALUE,
            message=msg,
            index=index,
            causes=() if cause is None else (cause,),
        )

    @staticmethod
    def explicit_failure(message: str, index: int) -> Diagnostic:
        """Failure requested by the grammar through fail()."""
        return Diagnostic(code=DiagnosticCode.EXPLICIT_FAILURE, message=message, index=index)

    # =========================================================================
    # Grammar errors (fatal)
    # =========================================================================

    @staticmethod
    def not_a_parser(origin: str, value: object) -> Diagnostic:
        """A Parser was required but something else was supplied.

        Args:
            origin: Where the value came from (e.g. "contextual: yielded value")
            value: The offending value

        Returns:
            Diagnostic for NOT_A_PARSER
        """
        msg = f"{origin} must always be a Parser, got {type(value).__name__}: {value!r}"
        return Diagnostic(
            code=DiagnosticCode.NOT_A_PARSER,
            message=msg,
            hint="Build grammar steps from stateparse primitives and combinators",
        )

    @staticmethod
    def invalid_literal(value: object) -> Diagnostic:
        """string() called with an empty or non-str literal."""
        msg = f"string: literal must be a non-empty str, got {value!r}"
        return Diagnostic(code=DiagnosticCode.INVALID_LITERAL, message=msg)

    @staticmethod
    def invalid_target(value: object) -> Diagnostic:
        """run() called with a target that is neither text nor binary."""
        msg = (
            "run: target must be str, bytes, bytearray or memoryview, "
            f"got {type(value).__name__}"
        )
        return Diagnostic(code=DiagnosticCode.INVALID_TARGET, message=msg)

    @staticmethod
    def forward_undefined(name: str) -> Diagnostic:
        """Forward cell invoked before define()."""
        msg = f"Forward {name!r} was used before being defined"
        return Diagnostic(
            code=DiagnosticCode.FORWARD_UNDEFINED,
            message=msg,
            hint="Call define() on every Forward once all grammar rules exist",
        )

    @staticmethod
    def forward_redefined(name: str) -> Diagnostic:
        """Forward cell defined twice."""
        msg = f"Forward {name!r} is already defined"
        return Diagnostic(code=DiagnosticCode.FORWARD_REDEFINED, message=msg)

    @staticmethod
    def empty_choice() -> Diagnostic:
        """choice() called without alternatives."""
        return Diagnostic(
            code=DiagnosticCode.EMPTY_CHOICE,
            message="choice: at least one alternative is required",
        )

    @staticmethod
    def not_callable(name: str, value: object) -> Diagnostic:
        """A callable argument was required."""
        msg = f"{name}: expected a callable, got {type(value).__name__}"
        return Diagnostic(code=DiagnosticCode.NOT_CALLABLE, message=msg)

    @staticmethod
    def not_a_generator(value: object) -> Diagnostic:
        """contextual() step function did not return a generator."""
        msg = f"contextual: step function must return a generator, got {type(value).__name__}"
        return Diagnostic(
            code=DiagnosticCode.NOT_A_GENERATOR,
            message=msg,
            hint="Define the step function with 'def' and at least one 'yield'",
        )
