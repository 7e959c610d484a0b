"""stateparse - parser combinators over an explicit, immutable parse state.

A grammar is a single Parser value composed from primitives and
combinators. run(parser, target) threads an immutable ParseState
(index, result, error) through it and returns the terminal state.
Grammar mismatches never raise: they are reported in ``state.error``.

Public API:
    run - Apply a parser to text (str) or binary (bytes) input
    Parser - Immutable parser value (map, chain, error_map, run, parse)
    ParseState - Immutable snapshot threaded through every parser

Primitives:
    string, letters, digits - text matchers
    bit, zero, one - binary matchers (bit-addressed, MSB first)

Combinators:
    sequence_of, choice, many, many1, sep_by, sep_by1, between,
    succeed, fail, lazy, Forward, contextual

Exceptions:
    StateParseError - Base exception class
    GrammarError - Grammar construction/usage bug (always fatal)
    ParseFailedError - Raised by Parser.parse() / ParseState.unwrap()

Submodules:
    stateparse.diagnostics - Diagnostic codes, templates and formatting
"""

from .combinators import (
    between,
    choice,
    fail,
    many,
    many1,
    sep_by,
    sep_by1,
    sequence_of,
    succeed,
)
from .contextual import contextual
from .diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    ErrorTemplate,
    GrammarError,
    OutputFormat,
    ParseFailedError,
    StateParseError,
)
from .enums import InputKind
from .lazy import Forward, lazy
from .parser import Parser, run
from .primitives import bit, digits, letters, one, string, zero
from .state import ParseState

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("stateparse")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "Forward",
    "GrammarError",
    "InputKind",
    "OutputFormat",
    "ParseFailedError",
    "ParseState",
    "Parser",
    "StateParseError",
    "__version__",
    "between",
    "bit",
    "choice",
    "contextual",
    "digits",
    "fail",
    "lazy",
    "letters",
    "many",
    "many1",
    "one",
    "run",
    "sep_by",
    "sep_by1",
    "sequence_of",
    "string",
    "succeed",
    "zero",
]
