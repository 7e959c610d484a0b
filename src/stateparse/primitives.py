"""Primitive matchers for text and binary input.

Text primitives:
    string(literal)  exact literal
    letters          maximal run of [A-Za-z]
    digits           maximal run of [0-9]

Binary primitives (cursor counts bits, MSB first):
    bit              any bit, result 0 or 1
    zero / one       a bit that must be 0 / 1

Every primitive fails in-band, leaving the cursor where it was. Applied
to the other input kind it fails with UNSUPPORTED_INPUT instead of
raising.
"""

import re

from stateparse.diagnostics import ErrorTemplate, GrammarError
from stateparse.enums import InputKind
from stateparse.parser import Parser
from stateparse.state import ParseState

__all__ = ["bit", "digits", "letters", "one", "string", "zero"]

# ASCII only: str.isalpha()/isdigit() accept Unicode letters and digits
# such as "é" or "²", which are not part of either class.
_LETTERS_PATTERN = re.compile(r"[A-Za-z]+")
_DIGITS_PATTERN = re.compile(r"[0-9]+")


def _unsupported(name: str, expected: InputKind, state: ParseState) -> ParseState:
    return state.with_error(
        ErrorTemplate.unsupported_input(name, expected, state.kind, state.index)
    )


def string(literal: str) -> Parser[str]:
    """Match ``literal`` exactly at the cursor.

    Examples:
        string("hello") on "hello world" -> "hello", index 5
        string("hello") on "help"        -> failure at index 0

    Args:
        literal: Non-empty text to match

    Returns:
        Parser producing ``literal``

    Raises:
        GrammarError: If ``literal`` is empty or not a str
    """
    if not isinstance(literal, str) or not literal:
        raise GrammarError(ErrorTemplate.invalid_literal(literal))

    def transition(state: ParseState) -> ParseState:
        target, index = state.target, state.index
        if not isinstance(target, str):
            return _unsupported("string", InputKind.TEXT, state)
        if index >= len(target):
            return state.with_error(ErrorTemplate.unexpected_eof("string", index, literal))
        if target.startswith(literal, index):
            return state.with_result(index + len(literal), literal)
        return state.with_error(
            ErrorTemplate.literal_mismatch(literal, state.slice_ahead(len(literal)), index)
        )

    return Parser(transition, f"string({literal!r})")


def _character_run(name: str, pattern: re.Pattern[str], char_class: str) -> Parser[str]:
    """Build a parser matching one or more characters of a class."""

    def transition(state: ParseState) -> ParseState:
        target, index = state.target, state.index
        if not isinstance(target, str):
            return _unsupported(name, InputKind.TEXT, state)
        if index >= len(target):
            return state.with_error(ErrorTemplate.unexpected_eof(name, index))
        found = pattern.match(target, index)
        if found is None:
            return state.with_error(
                ErrorTemplate.character_class_mismatch(name, char_class, index)
            )
        return state.with_result(found.end(), found.group())

    return Parser(transition, name)


letters: Parser[str] = _character_run("letters", _LETTERS_PATTERN, "A-Z, a-z")
digits: Parser[str] = _character_run("digits", _DIGITS_PATTERN, "0-9")


def _bit_reader(name: str, expected: int | None) -> Parser[int]:
    """Build a parser reading one bit, optionally requiring its value."""

    def transition(state: ParseState) -> ParseState:
        if not isinstance(state.target, bytes):
            return _unsupported(name, InputKind.BINARY, state)
        if state.is_eof:
            return state.with_error(
                ErrorTemplate.bit_out_of_range(name, state.index, state.length)
            )
        value = state.read_bit()
        if expected is not None and value != expected:
            return state.with_error(
                ErrorTemplate.bit_mismatch(name, expected, value, state.index)
            )
        return state.with_result(state.index + 1, value)

    return Parser(transition, name)


bit: Parser[int] = _bit_reader("bit", None)
zero: Parser[int] = _bit_reader("zero", 0)
one: Parser[int] = _bit_reader("one", 1)
