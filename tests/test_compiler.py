"""
MiniTac Compiler Driver Tests
=============================

Tests for the Compiler driver, CompilerOptions (including environment
configuration), the full pipeline report and the package-level API.
"""

import pytest

import minitac
from minitac import analyze, fold, generate, parse, tokenize
from minitac.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_file,
    compile_source,
)
from minitac.compiler.ast import Assign, BinOp, If, IntLiteral
from minitac.compiler.errors import (
    ConstantFoldError,
    ParseError,
    TypeMismatchError,
    UndeclaredVariableError,
)
from minitac.compiler.lexer import TokenType
from minitac.errors import MiniTacError


EXAMPLE = "int x = 2 * 3; if (x > 5) { x = x - 1; }"


# =============================================================================
# Pipeline Tests
# =============================================================================

class TestPipeline:
    """Tests for compile_source() end to end."""

    def test_example_program(self):
        """Each top-level statement restarts temporaries and labels."""
        assert compile_source(EXAMPLE) == [
            "t0 = 2 * 3",
            "x = t0",
            "t0 = x > 5",
            "ifFalse t0 goto L0",
            "t1 = x - 1",
            "x = t1",
            "L0:",
        ]

    def test_result_artifacts(self):
        result = Compiler().compile_source(EXAMPLE, "example.mt")
        assert result.success
        assert result.filename == "example.mt"
        assert [t.type for t in result.tokens[:8]] == [
            TokenType.INT_KEYWORD,
            TokenType.IDENTIFIER,
            TokenType.ASSIGN,
            TokenType.INT_LITERAL,
            TokenType.MUL,
            TokenType.INT_LITERAL,
            TokenType.SEMICOLON,
            TokenType.IF,
        ]
        assert result.tokens[-1].type == TokenType.EOF
        assert result.program[0] == Assign("x", BinOp(IntLiteral(2), "*", IntLiteral(3)), "int")
        assert isinstance(result.program[1], If)
        assert result.analyzed
        assert result.symbols == {"x": "int"}
        assert result.optimized == result.program

    def test_folding_applies_to_returns(self):
        assert compile_source("return 2 * 3;") == ["return 6"]

    def test_empty_program(self):
        result = Compiler().compile_source("")
        assert result.success
        assert result.program == []
        assert result.tac == []

    def test_errors_propagate(self):
        with pytest.raises(ParseError):
            compile_source("int x = ;")
        with pytest.raises(UndeclaredVariableError):
            compile_source("y = 1;")
        with pytest.raises(TypeMismatchError):
            compile_source("int x = 5; x = 3.0;")
        with pytest.raises(ConstantFoldError):
            compile_source("return 1 / 0;")

    def test_semantic_error_shows_source_line(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            compile_source("int x = 5;\nx = 3.0;", "prog.mt")
        text = str(exc_info.value)
        assert text.startswith("prog.mt:2:1: error: type mismatch")
        assert "    x = 3.0;\n    ^" in text

    def test_huge_literal_mixed_with_float(self):
        digits = "9" * 400
        assert compile_source(f"return {digits} * 1.5;") == [f"t0 = {digits} * 1.5", "return t0"]

    def test_all_errors_share_base(self):
        with pytest.raises(MiniTacError):
            compile_source('string s = "oops;')

    def test_compiler_is_reusable(self):
        compiler = Compiler()
        compiler.compile_source("int x = 1;")
        assert compiler.compile_source("int x = 2;").tac == ["x = 2"]


# =============================================================================
# Options Tests
# =============================================================================

class TestOptions:
    """Tests for CompilerOptions and its effect on the pipeline."""

    def test_defaults(self):
        options = CompilerOptions()
        assert options.analyze is True
        assert options.fold is True

    def test_skip_analysis(self):
        result = Compiler(CompilerOptions(analyze=False)).compile_source("y = 1;")
        assert result.tac == ["y = 1"]
        assert not result.analyzed
        assert result.symbols == {}

    def test_skip_folding(self):
        result = Compiler(CompilerOptions(fold=False)).compile_source("return 2 * 3;")
        assert result.tac == ["t0 = 2 * 3", "return t0"]

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv("MINITAC_ANALYZE", raising=False)
        monkeypatch.delenv("MINITAC_FOLD", raising=False)
        assert CompilerOptions.from_env() == CompilerOptions()

    @pytest.mark.parametrize("value", ["0", "false", "No", " OFF "])
    def test_from_env_disables(self, monkeypatch, value):
        monkeypatch.setenv("MINITAC_FOLD", value)
        monkeypatch.setenv("MINITAC_ANALYZE", value)
        options = CompilerOptions.from_env()
        assert options.fold is False
        assert options.analyze is False

    def test_from_env_enables(self, monkeypatch):
        monkeypatch.setenv("MINITAC_FOLD", "yes")
        assert CompilerOptions.from_env().fold is True

    def test_from_env_ignores_invalid_values(self, monkeypatch):
        monkeypatch.setenv("MINITAC_FOLD", "maybe")
        assert CompilerOptions.from_env().fold is True


# =============================================================================
# Report and File Tests
# =============================================================================

class TestReport:
    """Tests for the full pipeline report."""

    def test_sections(self):
        lines = Compiler().compile_source(EXAMPLE).render().splitlines()
        assert lines[0] == "=== Semantic Analysis ==="
        assert lines[1] == "=== Optimized AST ==="
        assert lines[2] == "AssignNode(int x = BinOpNode(2 * 3))"
        assert lines[3].startswith("IfNode(cond=BinOpNode(VarNode(x) > 5)")
        assert lines[4] == "=== Intermediate Code ==="
        assert lines[5:] == compile_source(EXAMPLE)

    def test_skipped_analysis_is_reported(self):
        result = Compiler(CompilerOptions(analyze=False)).compile_source("x = 1;")
        assert result.render().splitlines()[:2] == ["=== Semantic Analysis ===", "(skipped)"]

    def test_default_result(self):
        result = CompilerResult()
        assert not result.success
        assert result.tac == []


class TestFiles:
    """Tests for compiling from files."""

    def test_compile_file(self, tmp_path):
        source = tmp_path / "prog.mt"
        source.write_text("int x = 1;\nx = x + 2;\n", encoding="utf-8")
        result = Compiler().compile_file(str(source))
        assert result.filename == str(source)
        assert result.tac == ["x = 1", "t0 = x + 2", "x = t0"]

    def test_compile_file_writes_output(self, tmp_path):
        source = tmp_path / "prog.mt"
        source.write_text("return 4 / 2;", encoding="utf-8")
        output = tmp_path / "prog.tac"
        assert compile_file(str(source), str(output)) == ["return 2"]
        assert output.read_text(encoding="utf-8") == "return 2\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Compiler().compile_file(str(tmp_path / "absent.mt"))

    def test_error_names_file(self, tmp_path):
        source = tmp_path / "bad.mt"
        source.write_text("x = 1;", encoding="utf-8")
        with pytest.raises(UndeclaredVariableError) as exc_info:
            Compiler().compile_file(str(source))
        assert str(exc_info.value).startswith(f"{source}:1:1: error:")


# =============================================================================
# Package API Tests
# =============================================================================

class TestPackageAPI:
    """Tests for the top-level entry points."""

    def test_version(self):
        assert minitac.__version__ == "1.0.0"

    def test_entry_points_chain(self):
        tokens = list(tokenize("int x = 2 * 3;"))
        assert tokens[-1].type == TokenType.EOF

        program = parse(EXAMPLE)
        assert analyze(program) == {"x": "int"}
        assert generate(fold(program[0])) == ["t0 = 2 * 3", "x = t0"]
