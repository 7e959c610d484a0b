"""Generator-driven sequential composition.

contextual() reads like imperative code and behaves like a fold of
nested chain() calls:

    @contextual
    def declaration():
        keyword = yield choice([string("VAR "), string("GLOBAL_VAR ")])
        name = yield letters
        return {"keyword": keyword, "name": name}

is equivalent to

    choice([...]).chain(lambda keyword:
        letters.chain(lambda name:
            succeed({"keyword": keyword, "name": name})))

Each ``yield`` hands a Parser to the driver; the driver applies it to
the current state and sends its result back as the value of the
``yield``. Steps run in a flat loop, so the stack depth does not grow
with the number of steps. The generator's return value becomes the
parser's result. The first failing step ends the composition with that
step's failure, unchanged.

A fresh generator is created every time the parser is applied, so one
contextual parser can be reused across runs, threads and backtracking.
"""

import logging
from collections.abc import Callable, Generator
from typing import Any

from stateparse.diagnostics import ErrorTemplate, GrammarError
from stateparse.parser import Parser
from stateparse.state import ParseState

__all__ = ["contextual"]

logger = logging.getLogger(__name__)

type Steps[T] = Generator[Parser[Any], Any, T]


def contextual[T](step_function: Callable[[], Steps[T]]) -> Parser[T]:
    """Build a parser from a generator of parsing steps.

    Args:
        step_function: Zero-argument generator function. Every value it
            yields must be a Parser; the value it returns is the result.

    Returns:
        Parser running the steps in order

    Raises:
        GrammarError: At construction if ``step_function`` is not
            callable. At parse time if it does not produce a generator or
            a step yields something other than a Parser. These abort the
            run instead of being reported as parse failures: they mean
            the grammar is wrong, not the input.
    """
    if not callable(step_function):
        raise GrammarError(ErrorTemplate.not_callable("contextual", step_function))

    name = getattr(step_function, "__name__", "steps")

    def transition(state: ParseState) -> ParseState:
        steps = step_function()
        if not isinstance(steps, Generator):
            raise GrammarError(ErrorTemplate.not_a_generator(steps))

        next_state = state
        sent: Any = None
        try:
            while True:
                try:
                    yielded = steps.send(sent)
                except StopIteration as done:
                    return next_state.with_results(done.value)
                if not isinstance(yielded, Parser):
                    diagnostic = ErrorTemplate.not_a_parser("contextual: yielded value", yielded)
                    logger.error("contextual %s: %s", name, diagnostic.message)
                    raise GrammarError(diagnostic)
                next_state = yielded(next_state)
                if next_state.error is not None:
                    return next_state
                sent = next_state.result
        finally:
            steps.close()

    return Parser(transition, f"contextual({name})")
