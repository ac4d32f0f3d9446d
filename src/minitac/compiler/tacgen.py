"""
MiniTac Three-Address Code Generator
====================================

This module lowers AST statements to three-address code (TAC): a flat
list of instruction lines, each with at most one operator and at most
two source operands.

Instruction Forms
-----------------
| Form                      | Meaning                                 |
|---------------------------|-----------------------------------------|
| t0 = a + b                | binary operation into a new temporary   |
| x = t0                    | copy into a variable                    |
| ifFalse t0 goto L0        | jump when the condition is zero         |
| goto L1                   | unconditional jump                      |
| L0:                       | label                                   |
| return t0 / return        | return with or without a value          |

Operands are temporaries (t0, t1, ...), variable names, or literal text:
integers in decimal, floats in Python repr form, strings double-quoted.

Control Flow Layout
-------------------
if (c) {A} else {B}:            while (c) {A}:

        <c>                     L0:
        ifFalse c goto L0               <c>
        <A>                             ifFalse c goto L1
        goto L1                         <A>
    L0:                                 goto L0
        <B>                     L1:
    L1:

for (init; c; update) {A}:

        <init>
    L0:
        <c>
        ifFalse c goto L1
        <A>
        <update>
        goto L0
    L1:

Temporaries and labels are numbered from zero again at the start of
every generate() call, so each top-level statement is self-contained.
"""

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


class TACGenerator:
    """
    Generates three-address code from the AST.

    Usage:
        generator = TACGenerator()
        for line in generator.generate(statement):
            print(line)
    """

    def __init__(self):
        # Instruction lines for the current generate() call
        self._output: list[str] = []

        # Name generation
        self._temp_counter: int = 0
        self._label_counter: int = 0

    def generate(self, node: ASTNode) -> list[str]:
        """
        Generate TAC for one top-level node.

        Args:
            node: A statement or expression

        Returns:
            Instruction lines in program order
        """
        self._output = []
        self._temp_counter = 0
        self._label_counter = 0

        self._generate_statement(node)

        return self._output

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _emit(self, line: str) -> None:
        self._output.append(line)

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _new_temp(self) -> str:
        temp = f"t{self._temp_counter}"
        self._temp_counter += 1
        return temp

    def _new_label(self) -> str:
        label = f"L{self._label_counter}"
        self._label_counter += 1
        return label

    # =========================================================================
    # Statements
    # =========================================================================

    def _generate_statement(self, stmt: ASTNode) -> None:
        """Generate code for any node in statement position."""
        if isinstance(stmt, Assign):
            self._generate_assign(stmt)
        elif isinstance(stmt, Block):
            self._generate_block(stmt)
        elif isinstance(stmt, If):
            self._generate_if(stmt)
        elif isinstance(stmt, While):
            self._generate_while(stmt)
        elif isinstance(stmt, For):
            self._generate_for(stmt)
        elif isinstance(stmt, Return):
            self._generate_return(stmt)
        else:
            # A bare expression: evaluated for its instructions, value unused
            self._generate_expression(stmt)

    def _generate_assign(self, stmt: Assign) -> None:
        value = self._generate_expression(stmt.value)
        self._emit(f"{stmt.name} = {value}")

    def _generate_block(self, block: Block) -> None:
        for stmt in block.statements:
            self._generate_statement(stmt)

    def _generate_if(self, stmt: If) -> None:
        else_label = self._new_label()

        condition = self._generate_expression(stmt.condition)
        self._emit(f"ifFalse {condition} goto {else_label}")

        self._generate_statement(stmt.then_block)

        if stmt.else_block is not None:
            end_label = self._new_label()
            self._emit(f"goto {end_label}")
            self._emit_label(else_label)
            self._generate_statement(stmt.else_block)
            self._emit_label(end_label)
        else:
            self._emit_label(else_label)

    def _generate_while(self, stmt: While) -> None:
        start_label = self._new_label()
        end_label = self._new_label()

        self._emit_label(start_label)
        condition = self._generate_expression(stmt.condition)
        self._emit(f"ifFalse {condition} goto {end_label}")

        self._generate_statement(stmt.body)

        self._emit(f"goto {start_label}")
        self._emit_label(end_label)

    def _generate_for(self, stmt: For) -> None:
        start_label = self._new_label()
        end_label = self._new_label()

        self._generate_statement(stmt.init)

        self._emit_label(start_label)
        condition = self._generate_expression(stmt.condition)
        self._emit(f"ifFalse {condition} goto {end_label}")

        self._generate_statement(stmt.body)
        self._generate_statement(stmt.update)

        self._emit(f"goto {start_label}")
        self._emit_label(end_label)

    def _generate_return(self, stmt: Return) -> None:
        if stmt.value is None:
            self._emit("return")
            return
        value = self._generate_expression(stmt.value)
        self._emit(f"return {value}")

    # =========================================================================
    # Expressions
    # =========================================================================

    def _generate_expression(self, expr: ASTNode) -> str:
        """
        Generate code for an expression.

        Returns:
            The operand holding the value: a temporary, a variable name or
            literal text
        """
        if isinstance(expr, IntLiteral):
            return str(expr.value)
        if isinstance(expr, FloatLiteral):
            return str(expr)
        if isinstance(expr, StringLiteral):
            return str(expr)
        if isinstance(expr, Var):
            return expr.name
        if isinstance(expr, BinOp):
            return self._generate_binary(expr)

        raise TypeError(f"cannot generate code for {expr.__class__.__name__} nodes")

    def _generate_binary(self, expr: BinOp) -> str:
        left = self._generate_expression(expr.left)
        right = self._generate_expression(expr.right)
        result = self._new_temp()
        self._emit(f"{result} = {left} {expr.op} {right}")
        return result


def generate(node: ASTNode) -> list[str]:
    """Generate TAC for one top-level node with a fresh generator."""
    return TACGenerator().generate(node)
