"""Structural combinators.

Builds new parsers from existing ones:

    sequence_of([a, b, c])          a then b then c, results concatenated
    choice([a, b, c])               first alternative that matches
    many(p) / many1(p)              zero-or-more / one-or-more repetitions
    sep_by(sep)(p) / sep_by1(sep)(p)  p separated by sep
    between(left, right)(p)         p bracketed by left and right
    succeed(value) / fail(message)  zero-consumption base cases

Backtracking:
    choice, many, many1, sep_by and sep_by1 are the only combinators that
    discard a failure. They do so by restarting from the clean state they
    held before the failed attempt; a failed attempt never leaves a trace
    in the returned state. Everything else propagates the first failure.

Result Flattening:
    sequence_of splices list results one level into its own result list
    and appends every other value. ``_splice`` is the only place that
    inspects the result variant.
"""

from collections.abc import Callable, Iterable
from typing import Any

from stateparse.diagnostics import Diagnostic, ErrorTemplate, GrammarError
from stateparse.parser import Parser
from stateparse.state import ParseState

__all__ = [
    "between",
    "choice",
    "fail",
    "many",
    "many1",
    "sep_by",
    "sep_by1",
    "sequence_of",
    "succeed",
]


def _require_parsers(name: str, parsers: Iterable[Parser[Any]]) -> tuple[Parser[Any], ...]:
    """Freeze an iterable of parsers, rejecting anything else."""
    frozen = tuple(parsers)
    for parser in frozen:
        if not isinstance(parser, Parser):
            raise GrammarError(ErrorTemplate.not_a_parser(f"{name}: argument", parser))
    return frozen


def _splice(results: list[Any], value: Any) -> None:
    """Append a step result, flattening the sequence variant one level."""
    match value:
        case list():
            results.extend(value)
        case _:
            results.append(value)


def _names(parsers: tuple[Parser[Any], ...]) -> str:
    return ", ".join(parser.name for parser in parsers)


# =============================================================================
# Sequencing and alternation
# =============================================================================


def sequence_of(parsers: Iterable[Parser[Any]]) -> Parser[list[Any]]:
    """Apply parsers one after another.

    Each parser starts where the previous one stopped. The first failure
    aborts the sequence: its message is prefixed with ``sequence_of:``
    and its failing index is kept.

    Example:
        >>> from stateparse import run, letters, digits
        >>> run(sequence_of([letters, digits]), "abc123").result
        ['abc', '123']
        >>> run(sequence_of([sequence_of([letters, digits]), letters]), "a1b").result
        ['a', '1', 'b']

    Args:
        parsers: Parsers to apply in order

    Returns:
        Parser producing the concatenated step results
    """
    steps = _require_parsers("sequence_of", parsers)

    def transition(state: ParseState) -> ParseState:
        results: list[Any] = []
        next_state = state
        for parser in steps:
            next_state = parser(next_state)
            if next_state.error is not None:
                return next_state.with_error(ErrorTemplate.in_sequence(next_state.error))
            _splice(results, next_state.result)
        return next_state.with_results(results)

    return Parser(transition, f"sequence_of([{_names(steps)}])")


def choice(parsers: Iterable[Parser[Any]]) -> Parser[Any]:
    """Return the result of the first parser that matches.

    Every alternative is applied to the same starting state, so a failed
    alternative consumes nothing. First match wins; there is no
    longest-match rule.

    Args:
        parsers: Alternatives in priority order

    Returns:
        Parser producing the first successful alternative's result. When
        all fail, the error sits at the starting index with code
        NO_ALTERNATIVE and every alternative's diagnostic in ``causes``.

    Raises:
        GrammarError: If ``parsers`` is empty
    """
    alternatives = _require_parsers("choice", parsers)
    if not alternatives:
        raise GrammarError(ErrorTemplate.empty_choice())

    def transition(state: ParseState) -> ParseState:
        causes: list[Diagnostic] = []
        for parser in alternatives:
            next_state = parser(state)
            if next_state.error is None:
                return next_state
            causes.append(next_state.error)
        return state.with_error(ErrorTemplate.no_alternative(state.index, tuple(causes)))

    return Parser(transition, f"choice([{_names(alternatives)}])")


# =============================================================================
# Repetition
# =============================================================================


def _repeat(
    parser: Parser[Any], state: ParseState
) -> tuple[list[Any], ParseState, Diagnostic | None]:
    """Apply parser until it fails.

    Returns:
        (results, last clean state, diagnostic of the failed attempt)
    """
    results: list[Any] = []
    next_state = state
    while True:
        attempt = parser(next_state)
        if attempt.error is not None:
            return results, next_state, attempt.error
        results.append(attempt.result)
        next_state = attempt


def many[T](parser: Parser[T]) -> Parser[list[T]]:
    """Match ``parser`` zero or more times.

    Never fails. The attempt that stops the repetition is discarded, so
    the returned state is the one after the last success.

    Note:
        ``parser`` must consume input on success; a parser that succeeds
        without advancing repeats forever.
    """
    (inner,) = _require_parsers("many", [parser])

    def transition(state: ParseState) -> ParseState:
        results, last_state, _ = _repeat(inner, state)
        return last_state.with_results(results)

    return Parser(transition, f"many({inner.name})")


def many1[T](parser: Parser[T]) -> Parser[list[T]]:
    """Match ``parser`` one or more times.

    Fails at the original index, with code NO_REPETITION, exactly when
    ``many(parser)`` would produce an empty list.
    """
    (inner,) = _require_parsers("many1", [parser])

    def transition(state: ParseState) -> ParseState:
        results, last_state, failure = _repeat(inner, state)
        if not results:
            return state.with_error(ErrorTemplate.no_repetition(state.index, failure))
        return last_state.with_results(results)

    return Parser(transition, f"many1({inner.name})")


def _separated(
    separator: Parser[Any], value: Parser[Any], state: ParseState
) -> tuple[list[Any], ParseState, Diagnostic | None]:
    """Collect value results separated by separator.

    A matched separator stays consumed even when no value follows it.
    """
    results: list[Any] = []
    next_state = state
    attempt = value(next_state)
    while attempt.error is None:
        results.append(attempt.result)
        after_separator = separator(attempt)
        if after_separator.error is not None:
            return results, attempt, after_separator.error
        next_state = after_separator
        attempt = value(after_separator)
    return results, next_state, attempt.error


def sep_by(separator: Parser[Any]) -> Callable[[Parser[Any]], Parser[list[Any]]]:
    """Match values separated by ``separator``; zero values allowed.

    Usage:
        comma_list = sep_by(string(","))
        words = comma_list(letters)   # "a,b,c" -> ["a", "b", "c"]

    Never fails. Stops cleanly when either the value or the separator
    fails. A trailing separator is consumed: the returned state is the
    one just before the value attempt that failed.
    """
    (sep,) = _require_parsers("sep_by", [separator])

    def build(value: Parser[Any]) -> Parser[list[Any]]:
        (item,) = _require_parsers("sep_by", [value])

        def transition(state: ParseState) -> ParseState:
            results, last_state, _ = _separated(sep, item, state)
            return last_state.with_results(results)

        return Parser(transition, f"sep_by({sep.name})({item.name})")

    return build


def sep_by1(separator: Parser[Any]) -> Callable[[Parser[Any]], Parser[list[Any]]]:
    """Match values separated by ``separator``; at least one value.

    Fails at the original index, with code NO_SEPARATED_VALUE, when no
    value could be parsed.
    """
    (sep,) = _require_parsers("sep_by1", [separator])

    def build(value: Parser[Any]) -> Parser[list[Any]]:
        (item,) = _require_parsers("sep_by1", [value])

        def transition(state: ParseState) -> ParseState:
            results, last_state, failure = _separated(sep, item, state)
            if not results:
                return state.with_error(ErrorTemplate.no_separated_value(state.index, failure))
            return last_state.with_results(results)

        return Parser(transition, f"sep_by1({sep.name})({item.name})")

    return build


# =============================================================================
# Bracketing and constants
# =============================================================================


def between(left: Parser[Any], right: Parser[Any]) -> Callable[[Parser[Any]], Parser[Any]]:
    """Match content surrounded by ``left`` and ``right``.

    The result is the content result unchanged, scalar or list; the
    bracketing results are dropped. A failure of any part keeps its code
    and index, with the message prefixed by ``between:``.

    Example:
        >>> from stateparse import run, string
        >>> parens = between(string("("), string(")"))
        >>> run(parens(string("abc")), "(abc)").result
        'abc'
    """
    opening, closing = _require_parsers("between", [left, right])

    def build(content: Parser[Any]) -> Parser[Any]:
        (inner,) = _require_parsers("between", [content])

        def transition(state: ParseState) -> ParseState:
            after_left = opening(state)
            after_content = inner(after_left)
            after_right = closing(after_content)
            if after_right.error is not None:
                return after_right.with_error(ErrorTemplate.in_between(after_right.error))
            return after_right.with_results(after_content.result)

        return Parser(transition, f"between({opening.name}, {closing.name})({inner.name})")

    return build


def succeed[T](value: T) -> Parser[T]:
    """Consume nothing and produce ``value``."""
    return Parser(lambda state: state.with_results(value), f"succeed({value!r})")


def fail(message: str) -> Parser[Any]:
    """Consume nothing and fail with ``message`` (code EXPLICIT_FAILURE)."""
    return Parser(
        lambda state: state.with_error(ErrorTemplate.explicit_failure(message, state.index)),
        f"fail({message!r})",
    )
