"""
MiniTac - A Teaching Compiler to Three-Address Code
===================================================

This package compiles a small C-like language to three-address code
(TAC), exposing every phase of the pipeline so its output can be
inspected on its own.

Main Components
---------------
- **compiler**: lexer, parser, semantic analyzer, constant folder and
  TAC generator, plus the Compiler driver that chains them
- **cli**: the `mtc` command-line tool

Quick Start
-----------
    >>> from minitac import tokenize, parse, analyze, fold, generate
    >>> program = parse("int x = 2 * 3; if (x > 5) { x = x - 1; }")
    >>> analyze(program)
    {'x': 'int'}
    >>> generate(fold(program[0]))
    ['t0 = 2 * 3', 'x = t0']

Or use the command-line tool:
    $ mtc program.mt -o program.tac
    $ mtc --full program.mt
"""

__version__ = "1.0.0"

from minitac.errors import MiniTacError, SourceLocation
from minitac.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
    tokenize,
    analyze,
    fold,
    generate,
    format_token_table,
)
from minitac.compiler import parse_source as parse

__all__ = [
    "__version__",
    "MiniTacError",
    "SourceLocation",
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    "tokenize",
    "parse",
    "analyze",
    "fold",
    "generate",
    "format_token_table",
]
