"""
MiniTac Constant Folder
=======================

This module rewrites binary operations whose operands are literals into
a single literal. It is a pure tree-to-tree transform: no symbol table,
no side effects, and the input tree is never modified.

Folding Rules
-------------
Binary operations are folded bottom-up:

| Left    | Right   | + - * /                       | relational        |
|---------|---------|-------------------------------|-------------------|
| int     | int     | int result, '/' truncates     | kept as BinOp     |
| float   | float   | float result (IEEE-754)       | kept as BinOp     |
| int     | float   | int promoted, then as float   | kept as BinOp     |
| other   | any     | kept as BinOp (children folded)                   |

Statements are rebuilt selectively:

- Assign: rebuilt with its original value; the right-hand side is not
  folded.
- If: condition, then block and else block are folded.
- For: only the body is folded; init, condition and update are kept.
- While: only the body is folded; the condition is kept.
- Return: the value is folded.
- Block, literals and variables pass through unchanged.

Integer division by zero raises ConstantFoldError. Float division by
zero yields an infinity (or NaN for 0.0 / 0.0). An int too large to
convert to float is not promoted, and its mixed operation stays
unfolded.

Example Usage
-------------
>>> from minitac.compiler.ast import BinOp, IntLiteral, FloatLiteral
>>> from minitac.compiler.folder import fold
>>> fold(BinOp(IntLiteral(3), "*", IntLiteral(5)))
IntLiteral(value=15)
>>> fold(BinOp(IntLiteral(2), "+", FloatLiteral(1.5)))
FloatLiteral(value=3.5)
"""

import logging
import math
from typing import Optional

from minitac.compiler.ast import (
    ARITHMETIC_OPERATORS,
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
from minitac.compiler.errors import ConstantFoldError

logger = logging.getLogger(__name__)


def truncating_divide(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def has_decimal_form(value: int) -> bool:
    """True if Python can render the integer as decimal text.

    Interpreters with an int string-conversion limit reject very long
    results; those are left unfolded so code generation can still print
    the original operands.
    """
    try:
        str(value)
    except ValueError:
        return False
    return True


def float_divide(left: float, right: float) -> float:
    """IEEE-754 division: x / 0.0 is a signed infinity, 0.0 / 0.0 is NaN."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class ConstantFolder(ASTVisitor):
    """
    Constant folding pass.

    Usage:
        folder = ConstantFolder()
        optimized = folder.fold(statement)
    """

    def fold(self, node: ASTNode) -> ASTNode:
        """
        Return a folded copy of the tree rooted at node.

        Raises:
            ConstantFoldError: On integer division by zero
        """
        return self.visit(node)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_BinOp(self, node: BinOp) -> ASTNode:
        left = self.visit(node.left)
        right = self.visit(node.right)
        return self._fold_binary(node, left, right)

    def _fold_binary(self, node: BinOp, left: ASTNode, right: ASTNode) -> ASTNode:
        if isinstance(left, IntLiteral) and isinstance(right, IntLiteral):
            return self._fold_int(node, left.value, right.value, left, right)

        if isinstance(left, FloatLiteral) and isinstance(right, FloatLiteral):
            return self._fold_float(node, left.value, right.value, left, right)

        # Mixed int/float: promote the int side and fold as floats
        if isinstance(left, IntLiteral) and isinstance(right, FloatLiteral):
            promoted = self._promote(left)
            if promoted is not None:
                return self._fold_float(node, promoted.value, right.value, promoted, right)
        elif isinstance(left, FloatLiteral) and isinstance(right, IntLiteral):
            promoted = self._promote(right)
            if promoted is not None:
                return self._fold_float(node, left.value, promoted.value, left, promoted)

        return self._rebuild(node, left, right)

    @staticmethod
    def _promote(literal: IntLiteral) -> Optional[FloatLiteral]:
        """Convert an int literal to float, or None if it exceeds the float range."""
        try:
            return FloatLiteral(float(literal.value), location=literal.location)
        except OverflowError:
            logger.debug("not folding: %d-bit integer does not fit a float", literal.value.bit_length())
            return None

    def _fold_int(self, node: BinOp, a: int, b: int, left: ASTNode, right: ASTNode) -> ASTNode:
        if node.op not in ARITHMETIC_OPERATORS:
            return self._rebuild(node, left, right)

        if node.op == "+":
            result = a + b
        elif node.op == "-":
            result = a - b
        elif node.op == "*":
            result = a * b
        else:
            if b == 0:
                raise ConstantFoldError(
                    f"integer division by zero in constant expression: {a} / {b}",
                    location=node.location,
                )
            result = truncating_divide(a, b)

        if not has_decimal_form(result):
            logger.debug("not folding: %s result has too many digits", node.op)
            return self._rebuild(node, left, right)

        logger.debug("folded %s %s %s -> %s", a, node.op, b, result)
        return IntLiteral(result, location=node.location)

    def _fold_float(self, node: BinOp, a: float, b: float, left: ASTNode, right: ASTNode) -> ASTNode:
        if node.op not in ARITHMETIC_OPERATORS:
            return self._rebuild(node, left, right)

        if node.op == "+":
            result = a + b
        elif node.op == "-":
            result = a - b
        elif node.op == "*":
            result = a * b
        else:
            result = float_divide(a, b)

        logger.debug("folded %r %s %r -> %r", a, node.op, b, result)
        return FloatLiteral(result, location=node.location)

    @staticmethod
    def _rebuild(node: BinOp, left: ASTNode, right: ASTNode) -> BinOp:
        return BinOp(left, node.op, right, location=node.location)

    def visit_IntLiteral(self, node: IntLiteral) -> ASTNode:
        return node

    def visit_FloatLiteral(self, node: FloatLiteral) -> ASTNode:
        return node

    def visit_StringLiteral(self, node: StringLiteral) -> ASTNode:
        return node

    def visit_Var(self, node: Var) -> ASTNode:
        return node

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Assign(self, node: Assign) -> ASTNode:
        return Assign(node.name, node.value, node.declared_type, location=node.location)

    def visit_If(self, node: If) -> ASTNode:
        condition = self.visit(node.condition)
        then_block = self.visit(node.then_block)
        else_block = self.visit(node.else_block) if node.else_block is not None else None
        return If(condition, then_block, else_block, location=node.location)

    def visit_For(self, node: For) -> ASTNode:
        body = self.visit(node.body)
        return For(node.init, node.condition, node.update, body, location=node.location)

    def visit_While(self, node: While) -> ASTNode:
        body = self.visit(node.body)
        return While(node.condition, body, location=node.location)

    def visit_Return(self, node: Return) -> ASTNode:
        value = self.visit(node.value) if node.value is not None else None
        return Return(value, location=node.location)

    def visit_Block(self, node: Block) -> ASTNode:
        return node


def fold(node: ASTNode) -> ASTNode:
    """Fold constant subexpressions of a tree (see ConstantFolder)."""
    return ConstantFolder().fold(node)
