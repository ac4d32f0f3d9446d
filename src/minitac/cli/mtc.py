"""
mtc - MiniTac Compiler Command-Line Interface
=============================================

This module implements the command-line interface for the MiniTac
compiler. Besides compiling to three-address code it can stop after any
phase and print what that phase produced.

Usage Examples
--------------
Basic compilation:
    $ mtc program.mt

With output file:
    $ mtc program.mt -o program.tac

Inspect a phase:
    $ mtc --tokens program.mt
    $ mtc --ast program.mt
    $ mtc --check program.mt

Full pipeline report, saved to a file:
    $ mtc --full program.mt -o report.txt

Verbose mode:
    $ mtc -v program.mt
"""

import logging
import sys
import traceback
from enum import IntEnum
from pathlib import Path
from typing import NoReturn, Optional

import click

from minitac import __version__
from minitac.compiler import Compiler, CompilerOptions
from minitac.compiler.ast import ASTPrinter
from minitac.compiler.lexer import Lexer, format_token_table
from minitac.compiler.parser import parse_source
from minitac.compiler.semantic import analyze
from minitac.errors import MiniTacError

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Exit status of the mtc command."""
    SUCCESS = 0
    COMPILE_ERROR = 1    # The first lexical, syntax, semantic or folding error
    INVALID_ARGS = 2     # Conflicting modes, unreadable input or unwritable output
    INTERNAL_ERROR = 3   # A bug in the compiler itself


def exit_code_for(error: Exception) -> ExitCode:
    """Map an exception raised while compiling to the exit status."""
    if isinstance(error, MiniTacError):
        return ExitCode.COMPILE_ERROR
    if isinstance(error, (OSError, UnicodeDecodeError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def fail(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report a failed run on stderr and exit.

    Compiler diagnostics already carry their location and source line,
    so they are printed as they are.
    """
    code = exit_code_for(error)

    if code == ExitCode.COMPILE_ERROR:
        click.echo(str(error), err=True)
    elif code == ExitCode.INVALID_ARGS:
        click.echo(f"Error: {error}", err=True)
    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exception(type(error), error, error.__traceback__)

    sys.exit(code)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def emit_report(text: str, output: Optional[Path]) -> None:
    """Print a report, or save it when an output file was given."""
    if output is None:
        click.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"Saved to: {output.name}")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: input.tac; report modes print to stdout)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token table and exit",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST and exit",
)
@click.option(
    "--check",
    is_flag=True,
    help="Run semantic analysis only",
)
@click.option(
    "--full",
    is_flag=True,
    help="Print the full pipeline report (analysis, optimized AST, TAC)",
)
@click.option(
    "--no-fold",
    is_flag=True,
    help="Skip constant folding",
)
@click.option(
    "--no-analyze",
    is_flag=True,
    help="Skip semantic analysis",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="mtc")
def main(
    input_file: Path,
    output: Optional[Path],
    tokens: bool,
    ast: bool,
    check: bool,
    full: bool,
    no_fold: bool,
    no_analyze: bool,
    verbose: bool,
) -> None:
    """
    Compile MiniTac source code to three-address code.

    INPUT_FILE is the source file to compile.

    \b
    Examples:
        mtc prog.mt                  # Outputs prog.tac
        mtc prog.mt -o out.tac       # Specify output file
        mtc --tokens prog.mt         # Show tokens
        mtc --ast prog.mt            # Show the syntax tree
        mtc --check prog.mt          # Semantic analysis only
        mtc --full prog.mt           # Full pipeline report

    \b
    Environment:
        MINITAC_ANALYZE=0            # Same as --no-analyze
        MINITAC_FOLD=0               # Same as --no-fold
    """
    modes = sum([tokens, ast, check, full])
    if modes > 1:
        click.echo("Error: --tokens, --ast, --check and --full are mutually exclusive", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    setup_logging(verbose)

    options = CompilerOptions.from_env()
    if no_fold:
        options.fold = False
    if no_analyze:
        options.analyze = False

    try:
        logger.debug("Compiling %s (analyze=%s, fold=%s)", input_file, options.analyze, options.fold)
        source = input_file.read_text(encoding="utf-8")
        filename = str(input_file)

        # Token dump mode
        if tokens:
            emit_report(format_token_table(Lexer(source, filename).tokenize()), output)
            return

        # AST dump mode
        if ast:
            printer = ASTPrinter()
            emit_report(printer.print_program(parse_source(source, filename)), output)
            return

        # Analysis only
        if check:
            analyze(parse_source(source, filename), source.splitlines())
            emit_report("Semantic analysis done.", output)
            return

        compiler = Compiler(options)
        result = compiler.compile_source(source, filename)

        if full:
            emit_report(result.render(), output)
            return

        if output is None:
            output = input_file.with_suffix(".tac")

        output.write_text("\n".join(result.tac) + "\n", encoding="utf-8")

        if verbose:
            click.echo(f"Tokenized: {len(result.tokens)} tokens")
            click.echo(f"Parsed: {len(result.program)} statements")
            click.echo(f"Wrote {len(result.tac)} TAC lines to {output}")

        click.echo(f"Compiled {input_file} -> {output}")

    except Exception as e:
        fail(e, verbose=verbose)


if __name__ == "__main__":
    main()
