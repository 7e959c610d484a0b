"""Parser value type and the run() entry point.

A Parser is an immutable value wrapping a pure state transition
``ParseState -> ParseState``. Every combinator in stateparse builds a new
Parser around the transitions of existing ones; nothing is ever mutated.

Architecture:
    run(parser, target) builds the initial state (index 0, no result, no
    error) and applies the parser. The sticky-error rule lives in
    Parser.__call__: a failed state handed to any parser comes back
    unchanged, so no combinator can consume input after a failure unless
    it deliberately restarts from an earlier clean state (choice, many,
    many1, sep_by, sep_by1).

    map, chain and error_map are the composition algebra the structural
    combinators are built from:

        digits.map(int)                      # transform the result
        tag.chain(lambda t: rules[t])        # pick the next parser from a result
        p.error_map(lambda msg, i: ...)      # rewrite the failure message

Thread Safety:
    Parsers hold no mutable state. One composed Parser may be run from
    many threads at once; each run allocates its own chain of states.

Python 3.13+.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from stateparse.diagnostics import ErrorTemplate, GrammarError
from stateparse.state import ParseState

__all__ = ["Parser", "Transition", "run"]

logger = logging.getLogger(__name__)

type Transition = Callable[[ParseState], ParseState]


@dataclass(frozen=True, slots=True, eq=False)
class Parser[T]:
    """Immutable parser value.

    Attributes:
        transition: Pure function from state to state. Only called with
            states that are not failed.
        name: Display name used in repr() and log output

    Example:
        >>> from stateparse import digits
        >>> number = digits.map(int)
        >>> number.run("42").result
        42
        >>> number.parse("x")
        Traceback (most recent call last):
        ...
        stateparse.diagnostics.errors.ParseFailedError: digits: Couldn't match digits at index 0
    """

    transition: Transition
    name: str = "parser"

    def __call__(self, state: ParseState) -> ParseState:
        """Apply the parser to a state.

        Failed states pass through unchanged (sticky error).
        """
        if state.error is not None:
            return state
        return self.transition(state)

    def __repr__(self) -> str:
        return f"<Parser {self.name}>"

    def run(self, target: str | bytes | bytearray | memoryview) -> ParseState:
        """Run this parser over ``target``; see :func:`run`."""
        return run(self, target)

    def parse(self, target: str | bytes | bytearray | memoryview) -> T:
        """Run this parser and return its result.

        Raises:
            ParseFailedError: If the parse failed
        """
        return run(self, target).unwrap()

    def named(self, name: str) -> "Parser[T]":
        """Return the same parser under a new display name."""
        return Parser(self.transition, name)

    def map[U](self, transform: Callable[[T], U]) -> "Parser[U]":
        """Transform the result of a successful parse.

        On error the state passes through unchanged; on success only
        ``result`` is replaced, index and error are untouched.

        Args:
            transform: Function applied to the parsed result

        Returns:
            New parser producing ``transform(result)``
        """

        def transition(state: ParseState) -> ParseState:
            next_state = self(state)
            if next_state.error is not None:
                return next_state
            return next_state.with_results(transform(next_state.result))

        return Parser(transition, f"{self.name}.map")

    def chain[U](self, continuation: Callable[[T], "Parser[U]"]) -> "Parser[U]":
        """Choose the next parser from the result of this one.

        The parser returned by ``continuation`` is applied to the state
        this parser produced, so it continues from the advanced cursor.

        Args:
            continuation: Function from parsed result to the next Parser

        Returns:
            New parser running this one, then the chosen one

        Raises:
            GrammarError: At parse time, if ``continuation`` returns
                something other than a Parser
        """

        def transition(state: ParseState) -> ParseState:
            next_state = self(state)
            if next_state.error is not None:
                return next_state
            next_parser = continuation(next_state.result)
            if not isinstance(next_parser, Parser):
                raise GrammarError(
                    ErrorTemplate.not_a_parser("chain: continuation result", next_parser)
                )
            return next_parser(next_state)

        return Parser(transition, f"{self.name}.chain")

    def error_map(self, handler: Callable[[str, int], str]) -> "Parser[T]":
        """Rewrite the failure message of this parser.

        Args:
            handler: Called with ``(message, index_at_failure)``; returns
                the replacement message. Code, index and causes are kept.

        Returns:
            New parser; a no-op on success
        """

        def transition(state: ParseState) -> ParseState:
            next_state = self(state)
            if next_state.error is None:
                return next_state
            message = handler(next_state.error.message, next_state.index)
            return next_state.with_error(
                ErrorTemplate.remessage(next_state.error, message)
            )

        return Parser(transition, f"{self.name}.error_map")


def run(parser: Parser[Any], target: str | bytes | bytearray | memoryview) -> ParseState:
    """Run a parser over a complete input.

    Args:
        parser: Parser to apply
        target: Text (``str``) or binary input. ``bytearray`` and
            ``memoryview`` are frozen into ``bytes``; ``str`` and ``bytes``
            are used as-is.

    Returns:
        Terminal ParseState. Grammar mismatches are reported in
        ``state.error``; run() does not raise for them.

    Raises:
        GrammarError: If ``parser`` is not a Parser or ``target`` is
            neither text nor binary

    Example:
        >>> from stateparse import letters, digits, sequence_of
        >>> run(sequence_of([letters, digits, letters]), "abc123def").result
        ['abc', '123', 'def']
    """
    if not isinstance(parser, Parser):
        raise GrammarError(ErrorTemplate.not_a_parser("run: parser", parser))

    match target:
        case str() | bytes():
            buffer: str | bytes = target
        case bytearray() | memoryview():
            buffer = bytes(target)
        case _:
            raise GrammarError(ErrorTemplate.invalid_target(target))

    initial = ParseState(buffer)
    logger.debug(
        "Running %s over %s input (%d units)", parser.name, initial.kind, initial.length
    )
    final = parser(initial)
    if final.error is not None:
        logger.debug("Parse failed at index %d: %s", final.index, final.error.message)
    else:
        logger.debug("Parse succeeded at index %d", final.index)
    return final
