"""
MiniTac Parser Tests
====================

Tests for the recursive descent parser: statements, expression
precedence and associativity, and syntax error reporting.
"""

import sys

import pytest

from minitac.compiler.ast import (
    Assign,
    BinOp,
    Block,
    FloatLiteral,
    For,
    If,
    IntLiteral,
    Return,
    StringLiteral,
    Var,
    While,
)
from minitac.compiler.errors import (
    CompileError,
    LexError,
    MissingExpressionError,
    ParseError,
    UnexpectedTokenError,
)
from minitac.compiler.lexer import Lexer, Token, TokenType
from minitac.compiler.parser import Parser, parse_source


def parse_one(source: str):
    """Parse source that holds exactly one statement."""
    statements = parse_source(source)
    assert len(statements) == 1
    return statements[0]


def parse_expr(text: str):
    """Parse the right-hand side of `x = text;`."""
    return parse_one(f"x = {text};").value


# =============================================================================
# Statement Tests
# =============================================================================

class TestStatements:
    """Tests for statement parsing."""

    def test_empty_program(self):
        assert parse_source("") == []

    def test_declaration(self):
        stmt = parse_one("int x = 2 * 3;")
        assert stmt == Assign("x", BinOp(IntLiteral(2), "*", IntLiteral(3)), "int")
        assert stmt.is_declaration

    def test_plain_assignment(self):
        stmt = parse_one("x = 1;")
        assert stmt == Assign("x", IntLiteral(1))
        assert not stmt.is_declaration

    @pytest.mark.parametrize("source,expected", [
        ("float f = 1.5;", Assign("f", FloatLiteral(1.5), "float")),
        ('string s = "hi";', Assign("s", StringLiteral("hi"), "string")),
    ])
    def test_typed_declarations(self, source, expected):
        assert parse_one(source) == expected

    def test_multiple_statements(self):
        statements = parse_source("int a = 1; int b = a;")
        assert statements == [
            Assign("a", IntLiteral(1), "int"),
            Assign("b", Var("a"), "int"),
        ]

    def test_if_without_else(self):
        stmt = parse_one("if (x > 5) { x = x - 1; }")
        assert stmt == If(
            BinOp(Var("x"), ">", IntLiteral(5)),
            Block((Assign("x", BinOp(Var("x"), "-", IntLiteral(1))),)),
        )
        assert stmt.else_block is None

    def test_if_with_else(self):
        stmt = parse_one("if (x) { y = 1; } else { y = 2; }")
        assert stmt.then_block == Block((Assign("y", IntLiteral(1)),))
        assert stmt.else_block == Block((Assign("y", IntLiteral(2)),))

    def test_for_loop(self):
        stmt = parse_one("for (int i = 0; i < 10; i = i + 1) { s = s + i; }")
        assert stmt == For(
            init=Assign("i", IntLiteral(0), "int"),
            condition=BinOp(Var("i"), "<", IntLiteral(10)),
            update=Assign("i", BinOp(Var("i"), "+", IntLiteral(1))),
            body=Block((Assign("s", BinOp(Var("s"), "+", Var("i"))),)),
        )

    def test_while_loop(self):
        stmt = parse_one("while (n) { n = n - 1; }")
        assert isinstance(stmt, While)
        assert stmt.condition == Var("n")
        assert len(stmt.body.statements) == 1

    def test_return_with_value(self):
        assert parse_one("return x + 1;") == Return(BinOp(Var("x"), "+", IntLiteral(1)))

    def test_bare_return(self):
        assert parse_one("return;") == Return()

    def test_top_level_block(self):
        assert parse_one("{ x = 1; { y = 2; } }") == Block((
            Assign("x", IntLiteral(1)),
            Block((Assign("y", IntLiteral(2)),)),
        ))

    def test_empty_block(self):
        assert parse_one("while (1) { }").body == Block(())

    def test_nested_control_flow(self):
        stmt = parse_one("while (a) { if (b) { return; } }")
        inner = stmt.body.statements[0]
        assert isinstance(inner, If)
        assert inner.then_block.statements == (Return(),)

    def test_statement_locations(self):
        statements = parse_source("x = 1;\n  y = 2;")
        assert statements[1].location.line == 2
        assert statements[1].location.column == 3


# =============================================================================
# Expression Tests
# =============================================================================

class TestExpressions:
    """Tests for expression precedence and associativity."""

    def test_literal_kinds(self):
        assert parse_expr("7") == IntLiteral(7)
        assert parse_expr("2.5") == FloatLiteral(2.5)
        assert parse_expr('"s"') == StringLiteral("s")
        assert parse_expr("y") == Var("y")

    def test_multiplication_binds_tighter(self):
        assert parse_expr("1 + 2 * 3") == BinOp(
            IntLiteral(1), "+", BinOp(IntLiteral(2), "*", IntLiteral(3))
        )

    def test_left_associative(self):
        assert parse_expr("1 - 2 - 3") == BinOp(
            BinOp(IntLiteral(1), "-", IntLiteral(2)), "-", IntLiteral(3)
        )
        assert parse_expr("8 / 4 / 2") == BinOp(
            BinOp(IntLiteral(8), "/", IntLiteral(4)), "/", IntLiteral(2)
        )

    def test_relational_shares_additive_tier(self):
        """`a < b + c` groups as `(a < b) + c`."""
        assert parse_expr("a < b + c") == BinOp(
            BinOp(Var("a"), "<", Var("b")), "+", Var("c")
        )

    def test_parentheses(self):
        assert parse_expr("(1 + 2) * 3") == BinOp(
            BinOp(IntLiteral(1), "+", IntLiteral(2)), "*", IntLiteral(3)
        )

    @pytest.mark.parametrize("op", ["==", "!=", "<", ">", "<=", ">="])
    def test_relational_operators(self, op):
        assert parse_expr(f"a {op} b") == BinOp(Var("a"), op, Var("b"))

    def test_parse_is_deterministic(self):
        source = "int x = 2 * 3; if (x > 5) { x = x - 1; } else { x = 0; }"
        assert parse_source(source) == parse_source(source)


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Tests for syntax error reporting."""

    def test_missing_expression(self):
        with pytest.raises(MissingExpressionError) as exc_info:
            parse_source("int x = ;")
        error = exc_info.value
        assert error.message == "Missing expression after '='"
        assert error.position == 8
        assert isinstance(error, ParseError)

    def test_missing_expression_at_end_of_input(self):
        with pytest.raises(MissingExpressionError):
            parse_source("x =")

    def test_missing_expression_in_for_update(self):
        with pytest.raises(MissingExpressionError):
            parse_source("for (int i = 0; i < 3; i = ) { }")

    def test_missing_identifier(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("int = 5;")
        assert exc_info.value.expected == "identifier"
        assert exc_info.value.found == "ASSIGN '='"

    def test_missing_semicolon(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("x = 1")
        assert exc_info.value.expected == "';'"
        assert exc_info.value.found == "end of input"

    def test_if_requires_parenthesis(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("if x > 1 { }")
        assert exc_info.value.expected == "'('"

    def test_if_requires_block(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("if (x) x = 1;")
        assert exc_info.value.expected == "'{'"

    def test_unclosed_block(self):
        with pytest.raises(ParseError):
            parse_source("while (x) { x = 1;")

    def test_bad_factor(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("x = * 2;")
        assert exc_info.value.expected == "expression"

    def test_unknown_token_in_expression(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("x = @;")
        assert exc_info.value.found == "UNKNOWN '@'"

    def test_unterminated_comment_is_rejected(self):
        """The soft lexer error surfaces as an unexpected token."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("x = 1; /* oops")
        assert exc_info.value.found == "UNKNOWN 'Unterminated comment'"

    def test_bare_expression_is_not_a_statement(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source("x;")

    @pytest.mark.skipif(
        getattr(sys, "get_int_max_str_digits", lambda: 0)() == 0,
        reason="interpreter has no int string-conversion limit",
    )
    def test_integer_literal_too_large(self):
        digits = "9" * (sys.get_int_max_str_digits() + 1)
        with pytest.raises(ParseError) as exc_info:
            parse_source(f"int x = {digits};")
        error = exc_info.value
        assert error.message == "integer literal too large"
        assert error.position == 8
        assert (error.location.line, error.location.column) == (1, 9)

    def test_long_integer_literal_within_limit(self):
        digits = "9" * 400
        assert parse_one(f"x = {digits};").value == IntLiteral(int(digits))

    def test_lex_error_propagates(self):
        with pytest.raises(LexError):
            parse_source('s = "open;')

    def test_error_message_format(self):
        with pytest.raises(CompileError) as exc_info:
            parse_source("x = 1;\ny = * 2;", "prog.mt")
        text = str(exc_info.value)
        assert text.startswith("prog.mt:2:5: error: unexpected token MUL '*'")
        assert "y = * 2;" in text
        assert "hint: expected expression" in text


# =============================================================================
# Parser API Tests
# =============================================================================

class TestParserAPI:
    """Tests for driving the Parser directly."""

    def test_accepts_lazy_token_stream(self):
        parser = Parser(Lexer("x = 1;").tokenize())
        assert parser.parse_program() == [Assign("x", IntLiteral(1))]

    def test_missing_eof_token_is_supplied(self):
        tokens = [
            Token(TokenType.IDENTIFIER, "x"),
            Token(TokenType.ASSIGN, "="),
            Token(TokenType.INT_LITERAL, "4"),
            Token(TokenType.SEMICOLON, ";"),
        ]
        assert Parser(tokens).parse_program() == [Assign("x", IntLiteral(4))]

    def test_current_token(self):
        parser = Parser(Lexer("return;").tokenize())
        assert parser.current.type == TokenType.RETURN
