"""
MiniTac Error Base
==================

This module defines the root of the exception hierarchy for the MiniTac
toolchain, together with the source location type that every phase uses
to point at offending input.

Exception Hierarchy
-------------------
MiniTacError (base)
└── CompileError (see minitac.compiler.errors)
    ├── LexError
    ├── ParseError
    ├── SemanticError
    └── ConstantFoldError

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MiniTacError(Exception):
    """
    Base exception for all MiniTac errors.

    Callers can catch every toolchain error with a single except clause:

        try:
            compile_source(text)
        except MiniTacError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Character offset from the start of the source (0-indexed)
    """
    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


def format_diagnostic(
    message: str,
    location: Optional[SourceLocation] = None,
    hint: Optional[str] = None,
    source_line: Optional[str] = None,
) -> str:
    """
    Format a diagnostic with location, source context and hint.

    Example output:
        prog.mt:3:9: error: undeclared variable 'y'
            y = 1;
            ^
        hint: declare it first, e.g. 'int y = ...;'
    """
    parts = []

    if location:
        parts.append(f"{location}: error: {message}")
    else:
        parts.append(f"error: {message}")

    if source_line is not None and location is not None:
        parts.append(f"    {source_line}")
        if location.column > 0:
            padding = " " * (4 + location.column - 1)
            parts.append(f"{padding}^")

    if hint:
        parts.append(f"hint: {hint}")

    return "\n".join(parts)
