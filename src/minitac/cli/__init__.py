"""
MiniTac Command-Line Interface
==============================

This package provides the command-line tool for MiniTac:

- **mtc**: the compiler, also able to show tokens, the AST, the result
  of semantic analysis, or a full pipeline report

The tool is a Click-based CLI application with help and uniform exit
codes (see minitac.cli.mtc.ExitCode).
"""

__all__ = ["mtc"]
