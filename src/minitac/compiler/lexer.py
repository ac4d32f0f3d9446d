"""
MiniTac Lexer (Tokenizer)
=========================

This module converts source text into a stream of tokens for the parser.
Tokens are produced one at a time on demand; the lexer never buffers
them, so a caller that wants a list must collect it.

Token Categories
----------------
- Keywords: int, float, string, if, else, for, while, return
- Identifiers: a letter followed by letters or digits
- Numbers: digits with at most one '.' (a '.' makes it a float)
- Strings: "double quoted", no escape sequences
- Operators: = + - * / == != < > <= >=
- Punctuation: ( ) { } ; ,

Anything else becomes a one-character UNKNOWN token; the lexer never
stops early on garbage.

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */

An unterminated multi-line comment yields a single UNKNOWN token whose
value is "Unterminated comment". An unterminated string literal raises
UnterminatedStringError.

Example Usage
-------------
>>> from minitac.compiler.lexer import Lexer
>>> for token in Lexer("int x = 42;").tokenize():
...     print(token)
Token(INT_KEYWORD, 'int', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(ASSIGN, '=', 1:7)
Token(INT_LITERAL, '42', 1:9)
Token(SEMICOLON, ';', 1:11)
Token(EOF, '', 1:12)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional

from minitac.errors import SourceLocation
from minitac.compiler.errors import UnterminatedStringError

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Lexical categories of the language."""

    # === Keywords - Type Specifiers ===
    INT_KEYWORD = auto()     # int
    FLOAT_KEYWORD = auto()   # float
    STRING_KEYWORD = auto()  # string

    # === Keywords - Control Flow ===
    IF = auto()              # if
    ELSE = auto()            # else
    FOR = auto()             # for
    WHILE = auto()           # while
    RETURN = auto()          # return

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    INT_LITERAL = auto()
    FLOAT_LITERAL = auto()
    STRING_LITERAL = auto()

    # === Operators ===
    ASSIGN = auto()          # =
    PLUS = auto()            # +
    MINUS = auto()           # -
    MUL = auto()             # *
    DIV = auto()             # /
    EQ = auto()              # ==
    NE = auto()              # !=
    LT = auto()              # <
    GT = auto()              # >
    LE = auto()              # <=
    GE = auto()              # >=

    # === Punctuation ===
    LPAREN = auto()          # (
    RPAREN = auto()          # )
    LBRACE = auto()          # {
    RBRACE = auto()          # }
    SEMICOLON = auto()       # ;
    COMMA = auto()           # ,

    # === Structural ===
    UNKNOWN = auto()
    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "int": TokenType.INT_KEYWORD,
    "float": TokenType.FLOAT_KEYWORD,
    "string": TokenType.STRING_KEYWORD,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "while": TokenType.WHILE,
    "return": TokenType.RETURN,
}

TYPE_KEYWORDS = frozenset({
    TokenType.INT_KEYWORD,
    TokenType.FLOAT_KEYWORD,
    TokenType.STRING_KEYWORD,
})

# Checked in order, so each two-character operator wins over its prefix
RELATIONAL_OPERATORS: tuple[tuple[str, TokenType], ...] = (
    ("==", TokenType.EQ),
    ("!=", TokenType.NE),
    ("<=", TokenType.LE),
    (">=", TokenType.GE),
    ("<", TokenType.LT),
    (">", TokenType.GT),
)

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}

UNTERMINATED_COMMENT = "Unterminated comment"


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    Two tokens are equal when their type and value match; the location is
    carried for error reporting only.

    Attributes:
        type: The TokenType classification
        value: The exact matched text (canonical symbol for operators)
        location: Where the token starts in the source
    """
    type: TokenType
    value: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        if self.location is None:
            return f"Token({self.type.name}, {self.value!r})"
        return f"Token({self.type.name}, {self.value!r}, {self.location.line}:{self.location.column})"

    def describe(self) -> str:
        """Short human-readable form used in parser diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        return f"{self.type.name} '{self.value}'"

    def is_type_keyword(self) -> bool:
        """Return True if this token names a variable type."""
        return self.type in TYPE_KEYWORDS


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes MiniTac source code.

    The lexer keeps a cursor over the source and hands out one token per
    call to next_token(). After the end of input it keeps returning EOF.
    A lexer is not restartable: construct a new one to tokenize again.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    @property
    def position(self) -> int:
        """Current cursor offset into the source."""
        return self._pos

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the EOF token.

        Raises:
            UnterminatedStringError: If a string literal is not closed
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Raises:
            UnterminatedStringError: If a string literal is not closed
        """
        while not self._at_end():
            char = self._peek()

            if char.isspace():
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                self._skip_line_comment()
                continue

            if char == "/" and self._peek(1) == "*":
                if self._skip_block_comment():
                    continue
                return self._unterminated_comment_token()

            return self._scan_token()

        return Token(TokenType.EOF, "", self._location())

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at cursor + offset, or "" past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character, keeping line and column up to date."""
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume `expected` if the source continues with it."""
        if self.source.startswith(expected, self._pos):
            for _ in expected:
                self._advance()
            return True
        return False

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column, self._pos)

    def current_line(self) -> str:
        """Source text of the line the cursor is on."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    # =========================================================================
    # Comment Handling
    # =========================================================================

    def _skip_line_comment(self) -> None:
        while not self._at_end() and self._peek() != "\n":
            self._advance()

    def _skip_block_comment(self) -> bool:
        """
        Skip a /* ... */ comment.

        Returns:
            False if the input ended before the closing */
        """
        self._advance()
        self._advance()

        while not self._at_end():
            if self._match("*/"):
                return True
            self._advance()

        return False

    def _unterminated_comment_token(self) -> Token:
        location = self._location()
        logger.warning("%s: unterminated block comment", location)
        return Token(TokenType.UNKNOWN, UNTERMINATED_COMMENT, location)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start = self._location()
        char = self._peek()

        if char.isalpha():
            return self._scan_identifier(start)

        for text, token_type in RELATIONAL_OPERATORS:
            if self._match(text):
                return Token(token_type, text, start)

        if char.isdecimal():
            return self._scan_number(start)

        if char == '"':
            return self._scan_string(start)

        self._advance()
        if char in SINGLE_CHAR_TOKENS:
            return Token(SINGLE_CHAR_TOKENS[char], char, start)

        return Token(TokenType.UNKNOWN, char, start)

    def _scan_identifier(self, start: SourceLocation) -> Token:
        """Scan a maximal run of letters and digits, then classify it."""
        chars = []
        while self._peek() and (self._peek().isalpha() or self._peek().isdecimal()):
            chars.append(self._advance())

        word = "".join(chars)
        return Token(KEYWORDS.get(word, TokenType.IDENTIFIER), word, start)

    def _scan_number(self, start: SourceLocation) -> Token:
        """
        Scan digits with at most one '.'.

        A second '.' ends the literal without being consumed, so "1.2.3"
        scans as FLOAT_LITERAL "1.2" and the next call starts at ".3".
        """
        chars = []
        has_dot = False
        while self._peek() and (self._peek().isdecimal() or self._peek() == "."):
            if self._peek() == ".":
                if has_dot:
                    break
                has_dot = True
            chars.append(self._advance())

        token_type = TokenType.FLOAT_LITERAL if has_dot else TokenType.INT_LITERAL
        return Token(token_type, "".join(chars), start)

    def _scan_string(self, start: SourceLocation) -> Token:
        """Scan a double-quoted string; the value excludes the quotes."""
        source_line = self.current_line()
        self._advance()

        chars = []
        while not self._at_end():
            if self._peek() == '"':
                self._advance()
                return Token(TokenType.STRING_LITERAL, "".join(chars), start)
            chars.append(self._advance())

        raise UnterminatedStringError(start, source_line)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> Iterator[Token]:
    """
    Lazily tokenize source text.

    The returned iterator is finite, ends with the EOF token and cannot be
    restarted.
    """
    return Lexer(source, filename).tokenize()


def format_token_table(tokens) -> str:
    """Render tokens as a two-column "Token Type / Value" listing."""
    lines = [f"{'Token Type':<20} {'Value':<10}", "-" * 35]
    for token in tokens:
        lines.append(f"{token.type.name:<20} {token.value:<10}".rstrip())
    return "\n".join(lines)
