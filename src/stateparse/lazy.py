"""Deferred parser construction for recursive grammars.

A grammar rule that refers to itself, directly or through other rules,
cannot be built eagerly: the rule value does not exist yet while its own
definition is being evaluated. Two tools defer the reference until parse
time.

lazy(thunk):
    Wraps a zero-argument function returning a Parser. The function runs
    the first time the wrapper is applied to a state, never at
    construction, and its Parser is reused afterwards.

        expr = lazy(lambda: choice([number, operation]))
        operation = between(lparen, rparen)(sequence_of([op, expr, expr]))

Forward(name):
    Two-phase construction. Declare the cell, use ``cell.parser`` in any
    rule, then bind it with ``define()`` once all rules exist.

        expr = Forward("expr")
        operation = between(lparen, rparen)(sequence_of([op, expr.parser]))
        expr.define(choice([number, operation]))

Both are resolved only at invocation time, so the combinator graph may
contain cycles without recursing forever during construction.
"""

import functools
import logging
import threading
from collections.abc import Callable

from stateparse.diagnostics import ErrorTemplate, GrammarError
from stateparse.parser import Parser
from stateparse.state import ParseState

__all__ = ["Forward", "lazy"]

logger = logging.getLogger(__name__)


def lazy[T](thunk: Callable[[], Parser[T]]) -> Parser[T]:
    """Defer building a parser until it is first applied.

    Args:
        thunk: Zero-argument callable producing the real Parser

    Returns:
        Parser delegating to ``thunk()``

    Raises:
        GrammarError: At construction if ``thunk`` is not callable; at
            parse time if it returns something other than a Parser
    """
    if not callable(thunk):
        raise GrammarError(ErrorTemplate.not_callable("lazy", thunk))

    @functools.cache
    def resolve() -> Parser[T]:
        parser = thunk()
        if not isinstance(parser, Parser):
            raise GrammarError(ErrorTemplate.not_a_parser("lazy: thunk result", parser))
        logger.debug("lazy resolved to %s", parser.name)
        return parser

    def transition(state: ParseState) -> ParseState:
        return resolve()(state)

    return Parser(transition, "lazy")


class Forward[T]:
    """Indirection cell for a parser defined after it is referenced.

    Attributes:
        name: Display name, used in parser names and error messages
        parser: Parser delegating to the bound target; usable in
            compositions before define() is called

    Thread Safety:
        define() is serialized by a lock and may succeed only once.
        After that the cell is read-only, so ``parser`` may be run from
        many threads.
    """

    __slots__ = ("_lock", "_target", "name", "parser")

    def __init__(self, name: str = "forward") -> None:
        self.name = name
        self._target: Parser[T] | None = None
        self._lock = threading.Lock()
        self.parser: Parser[T] = Parser(self._apply, f"forward({name})")

    def __repr__(self) -> str:
        state = "defined" if self.is_defined else "undefined"
        return f"<Forward {self.name} {state}>"

    @property
    def is_defined(self) -> bool:
        """True once define() has bound a parser."""
        return self._target is not None

    def define(self, parser: Parser[T]) -> None:
        """Bind the cell to its parser.

        Raises:
            GrammarError: If ``parser`` is not a Parser or the cell is
                already defined
        """
        if not isinstance(parser, Parser):
            raise GrammarError(ErrorTemplate.not_a_parser(f"Forward {self.name!r}: target", parser))
        with self._lock:
            if self._target is not None:
                raise GrammarError(ErrorTemplate.forward_redefined(self.name))
            self._target = parser
        logger.debug("Forward %s bound to %s", self.name, parser.name)

    def _apply(self, state: ParseState) -> ParseState:
        target = self._target
        if target is None:
            raise GrammarError(ErrorTemplate.forward_undefined(self.name))
        return target(state)