"""Tests for the Parser value and run().

Covers map, chain, error_map, named, run/parse entry points, target
normalization and the fatal errors run() raises for misuse.
"""

from __future__ import annotations

import logging

import pytest

from stateparse import (
    DiagnosticCode,
    GrammarError,
    InputKind,
    ParseFailedError,
    Parser,
    ParseState,
    choice,
    digits,
    letters,
    run,
    sequence_of,
    string,
    succeed,
)

# ============================================================================
# MAP
# ============================================================================


class TestMap:
    """Test result transformation."""

    def test_transforms_result(self) -> None:
        """The transform receives the parsed result."""
        state = run(digits.map(int), "42")

        assert state.result == 42
        assert state.index == 2

    def test_sequence_result(self) -> None:
        """A list result is passed as a whole."""
        parser = sequence_of([letters, digits]).map(lambda parts: "-".join(parts))

        assert run(parser, "ab12").result == "ab-12"

    def test_not_called_on_failure(self) -> None:
        """A failed parse skips the transform entirely."""
        calls: list[object] = []

        def transform(value: object) -> object:
            calls.append(value)
            return value

        state = run(digits.map(transform), "abc")

        assert state.is_error
        assert calls == []

    def test_index_untouched(self) -> None:
        """Only the result changes."""
        plain = run(letters, "abc")
        mapped = run(letters.map(len), "abc")

        assert mapped.index == plain.index
        assert mapped.result == 3


# ============================================================================
# CHAIN
# ============================================================================


class TestChain:
    """Test result-dependent continuation."""

    def test_selects_next_parser(self) -> None:
        """The continuation picks the parser for the rest of the input."""
        rules = {"n:": digits, "s:": letters}
        tag = choice([string("n:"), string("s:")])
        parser = tag.chain(lambda value: rules[value])

        assert run(parser, "n:123").result == "123"
        assert run(parser, "s:abc").result == "abc"

    def test_continues_from_advanced_cursor(self) -> None:
        """The chosen parser starts where the first one stopped."""
        parser = letters.chain(lambda _: digits)
        state = run(parser, "abc123")

        assert state.result == "123"
        assert state.index == 6

    def test_not_called_on_failure(self) -> None:
        """Failure skips the continuation."""
        calls: list[object] = []

        def continuation(value: object) -> Parser[str]:
            calls.append(value)
            return digits

        state = run(letters.chain(continuation), "123")

        assert state.is_error
        assert calls == []

    def test_continuation_failure_propagates(self) -> None:
        """A failing chosen parser fails the chain."""
        state = run(letters.chain(lambda _: digits), "abc!")

        assert state.index == 3
        assert state.error is not None
        assert state.error.message.startswith("digits:")

    def test_non_parser_continuation_is_fatal(self) -> None:
        """Returning something else from the continuation raises."""
        parser = letters.chain(lambda _: "digits")  # type: ignore[arg-type,return-value]

        with pytest.raises(GrammarError) as exc_info:
            run(parser, "abc")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.NOT_A_PARSER
        assert "chain: continuation result must always be a Parser" in str(exc_info.value)


# ============================================================================
# ERROR_MAP
# ============================================================================


class TestErrorMap:
    """Test failure message rewriting."""

    def test_rewrites_message(self) -> None:
        """The handler's return value replaces the message."""
        parser = digits.error_map(lambda msg, index: f"expected a number at {index}")
        state = run(parser, "abc")

        assert state.error is not None
        assert state.error.message == "expected a number at 0"

    def test_receives_original_message_and_index(self) -> None:
        """The handler sees the failure message and failing index."""
        seen: list[tuple[str, int]] = []

        def handler(message: str, index: int) -> str:
            seen.append((message, index))
            return message

        run(sequence_of([letters, digits]).error_map(handler), "ab!")

        assert seen == [("sequence_of: digits: Couldn't match digits at index 2", 2)]

    def test_keeps_code_and_index(self) -> None:
        """Only the message changes."""
        state = run(digits.error_map(lambda msg, index: "custom"), "x")

        assert state.index == 0
        assert state.error is not None
        assert state.error.code is DiagnosticCode.CHARACTER_CLASS_MISMATCH

    def test_noop_on_success(self) -> None:
        """A successful parse is untouched and the handler is not called."""
        calls: list[str] = []

        def handler(message: str, index: int) -> str:
            calls.append(message)
            return "unused"

        state = run(digits.error_map(handler), "12")

        assert state.result == "12"
        assert calls == []


# ============================================================================
# RUN / PARSE / NAMED
# ============================================================================


class TestRun:
    """Test the run() entry point."""

    def test_initial_state(self) -> None:
        """A parser sees index 0, no result and no error."""
        seen: list[ParseState] = []

        def transition(state: ParseState) -> ParseState:
            seen.append(state)
            return state

        run(Parser(transition), "abc")

        assert seen == [ParseState("abc", 0, None, None)]

    def test_text_target_kind(self) -> None:
        """str targets are text."""
        assert run(succeed(None), "x").kind is InputKind.TEXT

    def test_binary_target_kind(self) -> None:
        """bytes targets are binary."""
        assert run(succeed(None), b"x").kind is InputKind.BINARY

    def test_method_form(self) -> None:
        """Parser.run is the same as run()."""
        assert digits.run("12").result == run(digits, "12").result

    def test_does_not_raise_on_mismatch(self) -> None:
        """Grammar mismatches are reported in-band."""
        state = run(string("abc"), "xyz")

        assert state.is_error

    @pytest.mark.parametrize("target", [42, None, ["a", "b"], 3.5])
    def test_invalid_target_is_fatal(self, target: object) -> None:
        """Targets that are neither text nor binary raise GrammarError."""
        with pytest.raises(GrammarError) as exc_info:
            run(digits, target)  # type: ignore[arg-type]

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.INVALID_TARGET

    def test_non_parser_is_fatal(self) -> None:
        """run() requires a Parser."""
        with pytest.raises(GrammarError):
            run(lambda state: state, "abc")  # type: ignore[arg-type]

    def test_grammar_error_is_type_error(self) -> None:
        """GrammarError can be caught as TypeError."""
        with pytest.raises(TypeError):
            run("digits", "123")  # type: ignore[arg-type]

    def test_logs_outcome(self, caplog: pytest.LogCaptureFixture) -> None:
        """run() logs start and outcome at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="stateparse.parser"):
            run(digits, "12x")
            run(digits, "x")

        messages = [record.getMessage() for record in caplog.records]
        assert "Running digits over text input (3 units)" in messages
        assert "Parse succeeded at index 2" in messages
        assert "Parse failed at index 0: digits: Couldn't match digits at index 0" in messages


class TestParse:
    """Test the raising convenience API."""

    def test_returns_result(self) -> None:
        """parse() returns the result on success."""
        assert digits.map(int).parse("123") == 123

    def test_raises_on_failure(self) -> None:
        """parse() raises ParseFailedError carrying the failed state."""
        with pytest.raises(ParseFailedError) as exc_info:
            digits.parse("abc")

        error = exc_info.value
        assert error.state.is_error
        assert error.state.index == 0
        assert error.diagnostic is error.state.error
        assert str(error) == "digits: Couldn't match digits at index 0"

    def test_unwrap_matches_parse(self) -> None:
        """ParseState.unwrap() is the state-level equivalent."""
        assert run(letters, "ab").unwrap() == "ab"
        with pytest.raises(ParseFailedError):
            run(letters, "12").unwrap()


class TestNamed:
    """Test display names."""

    def test_repr_uses_name(self) -> None:
        """repr shows the parser name."""
        assert repr(digits) == "<Parser digits>"
        assert repr(string("ab")) == "<Parser string('ab')>"

    def test_named_renames(self) -> None:
        """named() changes only the display name."""
        number = digits.named("number")

        assert number.name == "number"
        assert run(number, "12").result == "12"
        assert digits.name == "digits"

    def test_combinator_names(self) -> None:
        """Combinators derive their names from their parts."""
        assert sequence_of([letters, digits]).name == "sequence_of([letters, digits])"
        assert digits.map(int).name == "digits.map"

    def test_parsers_are_immutable(self) -> None:
        """Parser fields cannot be reassigned."""
        with pytest.raises(AttributeError):
            digits.name = "other"  # type: ignore[misc]
