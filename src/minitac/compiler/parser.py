"""
MiniTac Recursive Descent Parser
================================

This module implements a recursive descent parser with one token of
lookahead. Tokens are pulled from the lexer on demand, and the first
mismatch aborts the parse; there is no error recovery.

Grammar (EBNF)
--------------
program     ::= statement*
statement   ::= if | for | while | return | block | assignment
assignment  ::= type_kw? IDENTIFIER '=' expression ';'
block       ::= '{' statement* '}'
if          ::= 'if' '(' expression ')' block ('else' block)?
for         ::= 'for' '(' assignment expression ';' update ')' block
update      ::= type_kw? IDENTIFIER '=' expression
while       ::= 'while' '(' expression ')' block
return      ::= 'return' expression? ';'

expression  ::= term (('==' | '!=' | '<' | '>' | '<=' | '>=' | '+' | '-') term)*
term        ::= factor (('*' | '/') factor)*
factor      ::= INT | FLOAT | STRING | '(' expression ')' | IDENTIFIER

Precedence
----------
Only two tiers: '*' and '/' bind tighter than everything else, while
'+', '-' and all relational operators share the lower tier. So
`a < b + c` parses as `(a < b) + c`. All operators are left-associative.

Example Usage
-------------
>>> from minitac.compiler.parser import parse_source
>>> statements = parse_source("int x = 2 * 3;")
>>> print(statements[0])
AssignNode(int x = BinOpNode(2 * 3))
"""

from typing import Iterable, Iterator, Optional

from minitac.compiler.lexer import Lexer, Token, TokenType
from minitac.compiler.ast import (
    ASTNode,
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
from minitac.compiler.errors import MissingExpressionError, ParseError, UnexpectedTokenError


# Operators accepted at the expression tier, in token form
EXPRESSION_OPERATORS = frozenset({
    TokenType.EQ,
    TokenType.NE,
    TokenType.LT,
    TokenType.GT,
    TokenType.LE,
    TokenType.GE,
    TokenType.PLUS,
    TokenType.MINUS,
})

TERM_OPERATORS = frozenset({TokenType.MUL, TokenType.DIV})

# How expected tokens are named in diagnostics
TOKEN_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.IDENTIFIER: "identifier",
    TokenType.ASSIGN: "'='",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.SEMICOLON: "';'",
    TokenType.IF: "'if'",
    TokenType.ELSE: "'else'",
    TokenType.FOR: "'for'",
    TokenType.WHILE: "'while'",
    TokenType.RETURN: "'return'",
}


class Parser:
    """
    Recursive descent parser for MiniTac.

    The parser holds exactly one token of lookahead (the current token)
    and advances through the token stream with _expect(). A token stream
    may be a lazy iterator such as Lexer.tokenize().

    Attributes:
        filename: Source filename for error reporting
        source_lines: Original source lines for error context
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        self.filename = filename
        self.source_lines = source_lines or []

        self._tokens: Iterator[Token] = iter(tokens)
        self._current: Optional[Token] = None
        self._advance()

    @property
    def current(self) -> Token:
        """The lookahead token."""
        return self._current

    def parse_program(self) -> list[ASTNode]:
        """
        Parse top-level statements until end of input.

        Returns:
            Statements in program order

        Raises:
            ParseError: On the first token that does not fit the grammar
        """
        statements = []
        while not self._check(TokenType.EOF):
            statements.append(self._parse_statement())
        return statements

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> Token:
        """Consume the current token and pull the next one."""
        previous = self._current
        if previous is None or previous.type != TokenType.EOF:
            self._current = next(self._tokens, None) or Token(TokenType.EOF, "")
        return previous

    def _check(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _expect(self, token_type: TokenType) -> Token:
        """
        Consume the current token if it has the given type.

        Raises:
            UnexpectedTokenError: If the current token is of another type
        """
        if self._check(token_type):
            return self._advance()

        raise UnexpectedTokenError(
            self._current.describe(),
            expected=TOKEN_DESCRIPTIONS.get(token_type, token_type.name.lower()),
            location=self._current.location,
            source_line=self._get_source_line(self._current),
        )

    def _get_source_line(self, token: Token) -> Optional[str]:
        if token.location is None:
            return None
        line = token.location.line
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> ASTNode:
        token_type = self._current.type

        if token_type == TokenType.IF:
            return self._parse_if()
        if token_type == TokenType.FOR:
            return self._parse_for()
        if token_type == TokenType.WHILE:
            return self._parse_while()
        if token_type == TokenType.RETURN:
            return self._parse_return()
        if token_type == TokenType.LBRACE:
            return self._parse_block()

        return self._parse_assignment(expect_semicolon=True)

    def _parse_assignment(self, expect_semicolon: bool) -> Assign:
        """
        Parse `[type] name = expression [;]`.

        Args:
            expect_semicolon: False only for a for-loop update clause,
                which is closed by the enclosing ')' instead
        """
        location = self._current.location

        declared_type = None
        if self._current.is_type_keyword():
            declared_type = self._advance().value

        name = self._expect(TokenType.IDENTIFIER).value
        self._expect(TokenType.ASSIGN)

        terminators = {TokenType.SEMICOLON, TokenType.EOF}
        if not expect_semicolon:
            terminators.add(TokenType.RPAREN)
        if self._current.type in terminators:
            raise MissingExpressionError(
                self._current.describe(),
                location=self._current.location,
                source_line=self._get_source_line(self._current),
            )

        value = self._parse_expression()

        if expect_semicolon:
            self._expect(TokenType.SEMICOLON)

        return Assign(name, value, declared_type, location=location)

    def _parse_block(self) -> Block:
        location = self._current.location
        self._expect(TokenType.LBRACE)

        statements = []
        while not self._check(TokenType.RBRACE):
            statements.append(self._parse_statement())

        self._expect(TokenType.RBRACE)
        return Block(tuple(statements), location=location)

    def _parse_if(self) -> If:
        location = self._current.location
        self._expect(TokenType.IF)
        self._expect(TokenType.LPAREN)
        condition = self._parse_expression()
        self._expect(TokenType.RPAREN)
        then_block = self._parse_block()

        else_block = None
        if self._check(TokenType.ELSE):
            self._advance()
            else_block = self._parse_block()

        return If(condition, then_block, else_block, location=location)

    def _parse_for(self) -> For:
        location = self._current.location
        self._expect(TokenType.FOR)
        self._expect(TokenType.LPAREN)
        init = self._parse_assignment(expect_semicolon=True)
        condition = self._parse_expression()
        self._expect(TokenType.SEMICOLON)
        update = self._parse_assignment(expect_semicolon=False)
        self._expect(TokenType.RPAREN)
        body = self._parse_block()

        return For(init, condition, update, body, location=location)

    def _parse_while(self) -> While:
        location = self._current.location
        self._expect(TokenType.WHILE)
        self._expect(TokenType.LPAREN)
        condition = self._parse_expression()
        self._expect(TokenType.RPAREN)
        body = self._parse_block()

        return While(condition, body, location=location)

    def _parse_return(self) -> Return:
        location = self._current.location
        self._expect(TokenType.RETURN)

        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._parse_expression()

        self._expect(TokenType.SEMICOLON)
        return Return(value, location=location)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> ASTNode:
        """Parse the low tier: relational operators, '+' and '-'."""
        left = self._parse_term()

        while self._current.type in EXPRESSION_OPERATORS:
            operator = self._advance()
            right = self._parse_term()
            left = BinOp(left, operator.value, right, location=operator.location)

        return left

    def _parse_term(self) -> ASTNode:
        """Parse the high tier: '*' and '/'."""
        left = self._parse_factor()

        while self._current.type in TERM_OPERATORS:
            operator = self._advance()
            right = self._parse_factor()
            left = BinOp(left, operator.value, right, location=operator.location)

        return left

    def _parse_factor(self) -> ASTNode:
        token = self._current

        if token.type == TokenType.INT_LITERAL:
            try:
                value = int(token.value)
            except ValueError:
                # Python refuses to convert very long digit strings
                raise ParseError(
                    "integer literal too large",
                    expected="integer literal",
                    found=f"{len(token.value)}-digit number",
                    location=token.location,
                    source_line=self._get_source_line(token),
                ) from None
            self._advance()
            return IntLiteral(value, location=token.location)

        if token.type == TokenType.FLOAT_LITERAL:
            self._advance()
            return FloatLiteral(float(token.value), location=token.location)

        if token.type == TokenType.STRING_LITERAL:
            self._advance()
            return StringLiteral(token.value, location=token.location)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN)
            return expr

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Var(token.value, location=token.location)

        raise UnexpectedTokenError(
            token.describe(),
            expected="expression",
            location=token.location,
            source_line=self._get_source_line(token),
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> list[ASTNode]:
    """
    Parse source text into its top-level statements.

    Raises:
        LexError: If the source contains an unterminated string
        ParseError: If parsing fails
    """
    lexer = Lexer(source, filename)
    parser = Parser(lexer.tokenize(), filename, source.splitlines())
    return parser.parse_program()
