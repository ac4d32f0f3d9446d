"""
MiniTac Compiler Error Hierarchy
================================

This module defines the exceptions raised by the compiler pipeline.
All of them inherit from CompileError, which itself inherits from the
toolchain-wide MiniTacError.

Exception Hierarchy
-------------------
CompileError (base for all compiler errors)
├── LexError - unterminated string literal
├── ParseError - unexpected token at a grammar position
│   └── MissingExpressionError - nothing after '=' before a terminator
├── SemanticError - declaration and type checking failures
│   ├── UndeclaredVariableError - use or assignment before declaration
│   ├── DuplicateDeclarationError - second declaration of a name
│   └── TypeMismatchError - incompatible types
└── ConstantFoldError - integer division by zero while folding

Every error is fatal to the phase that raises it. There is no recovery
and no multi-error collection: the first error wins.
"""

from typing import Optional

from minitac.errors import MiniTacError, SourceLocation, format_diagnostic


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompileError(MiniTacError):
    """
    Base exception for all compiler errors.

    Attributes:
        message: The bare error description (reported verbatim to users)
        location: Where in the source the error occurred, when known
        hint: A suggestion for fixing the error
        source_line: The source text of the offending line
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        return format_diagnostic(self.message, self.location, self.hint, self.source_line)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexError(CompileError):
    """
    Error while tokenizing.

    Only an unterminated string literal raises. An unterminated block
    comment is reported as an UNKNOWN token instead, leaving the severity
    to the caller.
    """
    pass


class UnterminatedStringError(LexError):
    """String literal with no closing quote before end of input."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated string literal",
            location=location,
            hint="add closing '\"' to complete the string",
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class ParseError(CompileError):
    """
    Unexpected token during parsing.

    Attributes:
        expected: Description of what the grammar required
        found: Description of the token actually present
        position: Character offset of the offending token
    """

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        self.position = location.offset if location else None
        super().__init__(message, location=location, hint=hint, source_line=source_line)


class UnexpectedTokenError(ParseError):
    """The current token kind does not match the grammar position."""

    def __init__(
        self,
        found: str,
        expected: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            f"unexpected token {found}",
            expected=expected,
            found=found,
            location=location,
            source_line=source_line,
            hint=f"expected {expected}",
        )


class MissingExpressionError(ParseError):
    """An assignment has nothing between '=' and its terminator."""

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "Missing expression after '='",
            expected="expression",
            found=found,
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class SemanticError(CompileError):
    """
    Semantic error in a syntactically valid program.

    Examples:
        - Using an undeclared variable
        - Declaring a variable twice
        - Assigning a float to an int
        - A string used as a loop condition
    """
    pass


class UndeclaredVariableError(SemanticError):
    """Reference to, or assignment of, a name that was never declared."""

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        super().__init__(
            f"undeclared variable '{name}'",
            location=location,
            source_line=source_line,
            hint=f"declare it first, e.g. 'int {name} = ...;'",
        )


class DuplicateDeclarationError(SemanticError):
    """A name declared (given a type) more than once."""

    def __init__(
        self,
        name: str,
        declared_type: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        self.declared_type = declared_type
        super().__init__(
            f"variable '{name}' already declared",
            location=location,
            source_line=source_line,
            hint=f"'{name}' is already declared as '{declared_type}'; drop the type to reassign it",
        )


class TypeMismatchError(SemanticError):
    """
    Incompatible types.

    Raised for assignments, binary operations, conditions and return
    values whose types cannot be reconciled.
    """

    def __init__(
        self,
        message: str,
        expected_type: Optional[str] = None,
        actual_type: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected_type = expected_type
        self.actual_type = actual_type

        hint = None
        if expected_type and actual_type:
            hint = f"expected '{expected_type}', got '{actual_type}'"

        super().__init__(message, location=location, hint=hint, source_line=source_line)


# =============================================================================
# Optimizer Errors
# =============================================================================

class ConstantFoldError(CompileError, ArithmeticError):
    """
    Arithmetic failure while evaluating a constant expression.

    Integer division by zero is the only case: float division follows
    IEEE-754 and produces an infinity or NaN instead.
    """
    pass
