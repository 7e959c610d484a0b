"""Diagnostic system for stateparse errors.

Provides structured error diagnostics with codes, positions and hints.
Inspired by Rust compiler diagnostics.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorCategory
from .errors import GrammarError, ParseFailedError, StateParseError
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorCategory",
    "ErrorTemplate",
    "GrammarError",
    "OutputFormat",
    "ParseFailedError",
    "StateParseError",
]
