"""
MiniTac Semantic Analyzer
=========================

This module checks declarations and types over a parsed program. It
keeps a flat symbol table (name -> "int" | "float" | "string") for one
analysis run and raises on the first violation.

Rules
-----
- A declaring assignment must name a variable that is not yet declared.
- Every assignment target, and every variable read, must already be
  declared at that point of the traversal.
- Assignment: a string target takes only strings, an int target rejects
  floats, a float target accepts ints (implicit widening, logged at
  INFO level). Anything else must match exactly.
- Binary operations: operands of equal type, or one int and one float.
  The result is int for int/int and float when either side is float;
  string operands are always rejected.
- if/for/while conditions must be int or float.
- A returned expression must have a resolvable type.

Example Usage
-------------
>>> from minitac.compiler.parser import parse_source
>>> from minitac.compiler.semantic import analyze
>>> analyze(parse_source("int x = 5; float y = x;"))
{'x': 'int', 'y': 'float'}
>>> analyze(parse_source("y = 1;"))
Traceback (most recent call last):
    ...
minitac.compiler.errors.UndeclaredVariableError: <input>:1:1: error: undeclared variable 'y'
hint: declare it first, e.g. 'int y = ...;'
"""

import logging
from typing import Iterable, Optional

from minitac.compiler.ast import (
    ASTNode,
    ASTVisitor,
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
    DuplicateDeclarationError,
    TypeMismatchError,
    UndeclaredVariableError,
)

logger = logging.getLogger(__name__)

TYPE_INT = "int"
TYPE_FLOAT = "float"
TYPE_STRING = "string"
TYPE_UNKNOWN = "unknown"

NUMERIC_TYPES = frozenset({TYPE_INT, TYPE_FLOAT})


class SemanticAnalyzer(ASTVisitor):
    """
    Declaration and type checker.

    Call analyze() once per top-level statement, in program order. The
    symbol table lives as long as the analyzer, so one analyzer instance
    corresponds to one analysis run.

    Attributes:
        symbols: Declared variable names mapped to their type
        source_lines: Original source lines for error context
    """

    def __init__(self, source_lines: Optional[list[str]] = None):
        self.symbols: dict[str, str] = {}
        self.source_lines = source_lines or []

    def analyze(self, node: ASTNode) -> None:
        """
        Check one statement, updating the symbol table.

        Raises:
            SemanticError: On the first violation found
        """
        self.visit(node)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Assign(self, node: Assign) -> None:
        # The right-hand side is typed before the target is declared, so
        # `int x = x;` is a use before declaration.
        value_type = self.expression_type(node.value)

        if node.declared_type is not None:
            self._declare(node)

        target_type = self.symbols.get(node.name)
        if target_type is None:
            raise UndeclaredVariableError(node.name, node.location, self._source_line(node))

        self._check_assignment(node, target_type, value_type)

    def visit_BinOp(self, node: BinOp) -> None:
        self.expression_type(node)

    def visit_If(self, node: If) -> None:
        self._check_condition(node.condition, "if statement")
        self.visit(node.then_block)
        if node.else_block is not None:
            self.visit(node.else_block)

    def visit_For(self, node: For) -> None:
        self.visit(node.init)
        self._check_condition(node.condition, "for loop")
        self.visit(node.update)
        self.visit(node.body)

    def visit_While(self, node: While) -> None:
        self._check_condition(node.condition, "while statement")
        self.visit(node.body)

    def visit_Return(self, node: Return) -> None:
        if node.value is None:
            return
        if self.expression_type(node.value) == TYPE_UNKNOWN:
            raise TypeMismatchError(
                "return statement returns unknown type",
                location=node.location,
                source_line=self._source_line(node),
            )

    def visit_Block(self, node: Block) -> None:
        for stmt in node.statements:
            self.visit(stmt)

    # Bare expressions carry no declarations; only their type is checked.

    def visit_IntLiteral(self, node: IntLiteral) -> None:
        pass

    def visit_FloatLiteral(self, node: FloatLiteral) -> None:
        pass

    def visit_StringLiteral(self, node: StringLiteral) -> None:
        pass

    def visit_Var(self, node: Var) -> None:
        self.expression_type(node)

    # =========================================================================
    # Type Inference
    # =========================================================================

    def expression_type(self, node: ASTNode) -> str:
        """
        Infer the type of an expression.

        Returns:
            "int", "float", "string", or "unknown" for nodes that are not
            expressions

        Raises:
            UndeclaredVariableError: For a variable not in the symbol table
            TypeMismatchError: For incompatible binary operands
        """
        if isinstance(node, IntLiteral):
            return TYPE_INT
        if isinstance(node, FloatLiteral):
            return TYPE_FLOAT
        if isinstance(node, StringLiteral):
            return TYPE_STRING
        if isinstance(node, Var):
            var_type = self.symbols.get(node.name)
            if var_type is None:
                raise UndeclaredVariableError(node.name, node.location, self._source_line(node))
            return var_type
        if isinstance(node, BinOp):
            return self._binary_type(node)
        return TYPE_UNKNOWN

    def _binary_type(self, node: BinOp) -> str:
        left = self.expression_type(node.left)
        right = self.expression_type(node.right)

        if left != right and {left, right} != NUMERIC_TYPES:
            raise TypeMismatchError(
                f"type mismatch in binary operation: {left} {node.op} {right}",
                expected_type=left,
                actual_type=right,
                location=node.location,
                source_line=self._source_line(node),
            )

        if left == TYPE_INT and right == TYPE_INT:
            return TYPE_INT
        if TYPE_FLOAT in (left, right) and {left, right} <= NUMERIC_TYPES:
            return TYPE_FLOAT

        raise TypeMismatchError(
            f"incompatible types in binary operation: {left} {node.op} {right}",
            location=node.location,
            source_line=self._source_line(node),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _source_line(self, node: ASTNode) -> Optional[str]:
        if node.location is None:
            return None
        line = node.location.line
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _declare(self, node: Assign) -> None:
        existing = self.symbols.get(node.name)
        if existing is not None:
            raise DuplicateDeclarationError(
                node.name, existing, node.location, self._source_line(node)
            )
        self.symbols[node.name] = node.declared_type

    def _check_assignment(self, node: Assign, target_type: str, value_type: str) -> None:
        if target_type == TYPE_STRING and value_type != TYPE_STRING:
            raise TypeMismatchError(
                f"type mismatch: cannot assign {value_type} to string '{node.name}'",
                expected_type=target_type,
                actual_type=value_type,
                location=node.location,
                source_line=self._source_line(node),
            )

        if target_type == TYPE_INT and value_type == TYPE_FLOAT:
            raise TypeMismatchError(
                f"type mismatch: cannot assign float to int '{node.name}'",
                expected_type=target_type,
                actual_type=value_type,
                location=node.location,
                source_line=self._source_line(node),
            )

        if target_type == TYPE_FLOAT and value_type == TYPE_INT:
            logger.info("implicit widening: assigning int to float variable '%s'", node.name)
            return

        if target_type != value_type:
            raise TypeMismatchError(
                f"type mismatch: cannot assign {value_type} to {target_type} '{node.name}'",
                expected_type=target_type,
                actual_type=value_type,
                location=node.location,
                source_line=self._source_line(node),
            )

    def _check_condition(self, condition: ASTNode, construct: str) -> None:
        condition_type = self.expression_type(condition)
        if condition_type not in NUMERIC_TYPES:
            raise TypeMismatchError(
                f"invalid condition type in {construct}: expected int or float, got {condition_type}",
                expected_type="int or float",
                actual_type=condition_type,
                location=condition.location,
                source_line=self._source_line(condition),
            )


# =============================================================================
# Convenience Functions
# =============================================================================

def analyze(
    program: Iterable[ASTNode],
    source_lines: Optional[list[str]] = None,
) -> dict[str, str]:
    """
    Analyze a whole program with a fresh symbol table.

    Statements are checked in order and the first error is raised.
    Passing the program's source lines adds them to error messages.

    Returns:
        The final symbol table
    """
    analyzer = SemanticAnalyzer(source_lines)
    for stmt in program:
        analyzer.analyze(stmt)
    return analyzer.symbols
