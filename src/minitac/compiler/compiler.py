"""
MiniTac Compiler Main Module
============================

This module provides the main compiler interface. It orchestrates the
complete compilation process:

    Source → Lex → Parse → Analyze → Fold → Generate → TAC

Usage
-----
Command line:
    $ mtc program.mt -o program.tac

Programmatic:
    >>> from minitac import compile_source
    >>> compile_source("int x = 2 * 3;")
    ['t0 = 2 * 3', 'x = t0']

Compilation Pipeline
--------------------
1. **Lexical Analysis**: Convert source to tokens
2. **Parsing**: Build the list of top-level statements
3. **Semantic Analysis**: Check each statement in order against one
   symbol table (optional, on by default)
4. **Constant Folding**: Fold each statement (optional, on by default)
5. **Code Generation**: Lower each statement to TAC separately, so
   temporaries and labels restart at t0 and L0 per statement

Error Handling
--------------
The first error aborts the compilation. Errors are raised to the caller
unchanged; there is no error collection.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from minitac.compiler.ast import ASTNode
from minitac.compiler.folder import ConstantFolder
from minitac.compiler.lexer import Lexer, Token
from minitac.compiler.parser import Parser
from minitac.compiler.semantic import SemanticAnalyzer
from minitac.compiler.tacgen import TACGenerator

logger = logging.getLogger(__name__)

# Environment values that switch a boolean option off
FALSE_VALUES = frozenset({"0", "false", "no", "off"})
TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean from the environment; None when unset or unparseable."""
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().lower()
    if value in FALSE_VALUES:
        return False
    if value in TRUE_VALUES:
        return True
    return None


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        analyze: Run the semantic analyzer before code generation
        fold: Run the constant folder before code generation
    """
    analyze: bool = True
    fold: bool = True

    @classmethod
    def from_env(cls) -> "CompilerOptions":
        """
        Create CompilerOptions from environment variables.

        Environment variables (all optional):
            MINITAC_ANALYZE: "0", "false", "no" or "off" disables analysis
            MINITAC_FOLD: "0", "false", "no" or "off" disables folding

        Returns:
            CompilerOptions with values from environment variables
        """
        options = cls()

        if (analyze := _env_flag("MINITAC_ANALYZE")) is not None:
            options.analyze = analyze

        if (fold := _env_flag("MINITAC_FOLD")) is not None:
            options.fold = fold

        return options


class Compiler:
    """
    MiniTac compiler.

    Each compile_source() call builds a fresh lexer, parser, analyzer,
    folder and generator, so one Compiler can be reused and no state
    leaks between compilations.

    Example:
        compiler = Compiler()
        result = compiler.compile_file("program.mt")
        print("\\n".join(result.tac))

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> "CompilerResult":
        """
        Compile source text to three-address code.

        Args:
            source: Program source text
            filename: Source filename for error messages

        Returns:
            CompilerResult with the artifacts of every phase

        Raises:
            CompileError: On the first lexical, syntax, semantic or
                folding error
        """
        result = CompilerResult(filename=filename)

        # Stage 1: Lexical analysis
        result.tokens = self._lex(source, filename)
        logger.debug("%s: %d tokens", filename, len(result.tokens))

        source_lines = source.splitlines()

        # Stage 2: Parsing
        result.program = self._parse(result.tokens, filename, source_lines)
        logger.debug("%s: parsed %d statements", filename, len(result.program))

        # Stage 3: Semantic analysis
        if self.options.analyze:
            result.symbols = self._analyze(result.program, source_lines)
            result.analyzed = True
            logger.debug("%s: semantic analysis passed", filename)

        # Stage 4: Constant folding
        if self.options.fold:
            result.optimized = self._fold(result.program)
            logger.debug("%s: constant folding done", filename)
        else:
            result.optimized = list(result.program)

        # Stage 5: Code generation
        result.tac = self._generate(result.optimized)
        logger.debug("%s: generated %d TAC lines", filename, len(result.tac))

        result.success = True
        return result

    def compile_file(self, filepath: str) -> "CompilerResult":
        """
        Compile a source file.

        Raises:
            CompileError: If compilation fails
            FileNotFoundError: If the source file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))

    def _lex(self, source: str, filename: str) -> list[Token]:
        return list(Lexer(source, filename).tokenize())

    def _parse(self, tokens: list[Token], filename: str, source_lines: list[str]) -> list[ASTNode]:
        return Parser(tokens, filename, source_lines).parse_program()

    def _analyze(self, program: list[ASTNode], source_lines: list[str]) -> dict[str, str]:
        analyzer = SemanticAnalyzer(source_lines)
        for stmt in program:
            analyzer.analyze(stmt)
        return analyzer.symbols

    def _fold(self, program: list[ASTNode]) -> list[ASTNode]:
        folder = ConstantFolder()
        return [folder.fold(stmt) for stmt in program]

    def _generate(self, program: list[ASTNode]) -> list[str]:
        generator = TACGenerator()
        lines = []
        for stmt in program:
            lines.extend(generator.generate(stmt))
        return lines


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if compilation succeeded
        tokens: Every token, ending with EOF
        program: Parsed top-level statements
        analyzed: True if semantic analysis ran
        symbols: Final symbol table (empty when analysis was skipped)
        optimized: Statements after constant folding
        tac: Generated three-address code lines
    """
    filename: str = ""
    success: bool = False
    tokens: list[Token] = field(default_factory=list)
    program: list[ASTNode] = field(default_factory=list)
    analyzed: bool = False
    symbols: dict[str, str] = field(default_factory=dict)
    optimized: list[ASTNode] = field(default_factory=list)
    tac: list[str] = field(default_factory=list)

    def render(self) -> str:
        """Full pipeline report: analysis, optimized AST and TAC sections."""
        lines = ["=== Semantic Analysis ==="]
        if not self.analyzed:
            lines.append("(skipped)")

        lines.append("=== Optimized AST ===")
        lines.extend(str(stmt) for stmt in self.optimized)

        lines.append("=== Intermediate Code ===")
        lines.extend(self.tac)

        return "\n".join(lines)


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str, filename: str = "<input>") -> list[str]:
    """
    Compile source text to TAC lines with default options.

    Raises:
        CompileError: If compilation fails

    Example:
        >>> compile_source("int x = 1; x = x + 2;")
        ['x = 1', 't0 = x + 2', 'x = t0']
    """
    return Compiler().compile_source(source, filename).tac


def compile_file(filepath: str, output_path: Optional[str] = None) -> list[str]:
    """
    Compile a source file to TAC lines, optionally writing them out.

    Raises:
        CompileError: If compilation fails
        FileNotFoundError: If the source file does not exist
    """
    result = Compiler().compile_file(filepath)

    if output_path:
        Path(output_path).write_text("\n".join(result.tac) + "\n", encoding="utf-8")

    return result.tac
