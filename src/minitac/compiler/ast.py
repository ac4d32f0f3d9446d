"""
MiniTac Abstract Syntax Tree (AST) Definitions
==============================================

This module defines the AST node types produced by the parser and
consumed by the semantic analyzer, the constant folder and the TAC
generator.

Node Set
--------
ASTNode (base)
├── Statements
│   ├── Assign - assignment, optionally declaring the target's type
│   ├── If - if/else with block branches
│   ├── For - for (init; condition; update) block
│   ├── While - while (condition) block
│   ├── Return - return with optional value
│   └── Block - { statement* }
└── Expressions
    ├── BinOp - binary operator (+ - * / == != < > <= >=)
    ├── IntLiteral - integer constant
    ├── FloatLiteral - float64 constant
    ├── StringLiteral - string constant
    └── Var - variable reference

Design Notes
------------
- The node set is closed. NODE_TYPES lists every variant, and every
  traversal (analyzer, folder, generator, printer) handles each of them;
  ASTVisitor raises TypeError for a node class it has no handler for.
- Nodes are frozen dataclasses. Phases that change a tree build new
  nodes; nothing is mutated in place, so subtrees are never shared
  between an input tree and a rewritten one in a way that matters.
- Equality is structural. The source location is kept for diagnostics
  and does not take part in comparisons.
- children() exposes the labelled subtrees of any node so that an
  external renderer can walk the tree without knowing the node classes.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from minitac.errors import SourceLocation


ARITHMETIC_OPERATORS = frozenset({"+", "-", "*", "/"})
RELATIONAL_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">="})
BINARY_OPERATORS = ARITHMETIC_OPERATORS | RELATIONAL_OPERATORS

VARIABLE_TYPES = ("int", "float", "string")


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts (keyword-only,
            ignored by equality)
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )

    def children(self) -> list[tuple[str, "ASTNode"]]:
        """Ordered (label, child) pairs of this node's subtrees."""
        return []


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class IntLiteral(ASTNode):
    """Integer literal."""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatLiteral(ASTNode):
    """Floating point (float64) literal."""
    value: float

    def __str__(self) -> str:
        return repr(float(self.value))


@dataclass(frozen=True)
class StringLiteral(ASTNode):
    """String literal; the value excludes the surrounding quotes."""
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class Var(ASTNode):
    """Variable reference."""
    name: str

    def __str__(self) -> str:
        return f"VarNode({self.name})"


@dataclass(frozen=True)
class BinOp(ASTNode):
    """
    Binary operation (left op right).

    Attributes:
        left: Left operand
        op: Operator symbol, one of BINARY_OPERATORS
        right: Right operand
    """
    left: "Expression"
    op: str
    right: "Expression"

    def children(self) -> list[tuple[str, ASTNode]]:
        return [("Left", self.left), ("Right", self.right)]

    def __str__(self) -> str:
        return f"BinOpNode({self.left} {self.op} {self.right})"


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class Assign(ASTNode):
    """
    Assignment statement.

    Represents both `int x = 1;` (declaring) and `x = 2;` (plain).

    Attributes:
        name: Target variable name
        value: Right-hand side expression
        declared_type: "int", "float" or "string" when this assignment
            declares the variable, otherwise None
    """
    name: str
    value: "Expression"
    declared_type: Optional[str] = None

    @property
    def is_declaration(self) -> bool:
        return self.declared_type is not None

    def children(self) -> list[tuple[str, ASTNode]]:
        return [("Value", self.value)]

    def __str__(self) -> str:
        prefix = f"{self.declared_type} " if self.declared_type else ""
        return f"AssignNode({prefix}{self.name} = {self.value})"


@dataclass(frozen=True)
class Block(ASTNode):
    """
    Brace-enclosed statement list.

    Attributes:
        statements: Statements in program order (stored as a tuple)
    """
    statements: tuple["Statement", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "statements", tuple(self.statements))

    def children(self) -> list[tuple[str, ASTNode]]:
        return [(f"[{index}]", stmt) for index, stmt in enumerate(self.statements)]

    def __str__(self) -> str:
        return "BlockNode([" + ", ".join(str(stmt) for stmt in self.statements) + "])"


@dataclass(frozen=True)
class If(ASTNode):
    """
    If statement with optional else branch.

    Attributes:
        condition: Condition expression
        then_block: Block executed when the condition is non-zero
        else_block: Optional block executed otherwise
    """
    condition: "Expression"
    then_block: Block
    else_block: Optional[Block] = None

    def children(self) -> list[tuple[str, ASTNode]]:
        result = [("Condition", self.condition), ("Then", self.then_block)]
        if self.else_block is not None:
            result.append(("Else", self.else_block))
        return result

    def __str__(self) -> str:
        els = str(self.else_block) if self.else_block is not None else "None"
        return f"IfNode(cond={self.condition}, then={self.then_block}, else={els})"


@dataclass(frozen=True)
class For(ASTNode):
    """
    For loop.

    Attributes:
        init: Initialising assignment (may declare the loop variable)
        condition: Loop condition, checked before each iteration
        update: Assignment run after each iteration
        body: Loop body
    """
    init: Assign
    condition: "Expression"
    update: Assign
    body: Block

    def children(self) -> list[tuple[str, ASTNode]]:
        return [
            ("Initialization", self.init),
            ("Condition", self.condition),
            ("Update", self.update),
            ("Body", self.body),
        ]

    def __str__(self) -> str:
        return (
            f"ForNode(init={self.init}, cond={self.condition}, "
            f"update={self.update}, body={self.body})"
        )


@dataclass(frozen=True)
class While(ASTNode):
    """
    While loop.

    Attributes:
        condition: Loop condition
        body: Loop body
    """
    condition: "Expression"
    body: Block

    def children(self) -> list[tuple[str, ASTNode]]:
        return [("Condition", self.condition), ("Body", self.body)]

    def __str__(self) -> str:
        return f"WhileNode(cond={self.condition}, body={self.body})"


@dataclass(frozen=True)
class Return(ASTNode):
    """
    Return statement.

    Attributes:
        value: Optional returned expression
    """
    value: Optional["Expression"] = None

    def children(self) -> list[tuple[str, ASTNode]]:
        if self.value is None:
            return []
        return [("Value", self.value)]

    def __str__(self) -> str:
        value = str(self.value) if self.value is not None else "None"
        return f"ReturnNode(value={value})"


Expression = Union[BinOp, IntLiteral, FloatLiteral, StringLiteral, Var]
Statement = Union[Assign, If, For, While, Return, Block]
Node = Union[Expression, Statement]

# Every node variant; traversals must handle all of these.
NODE_TYPES: tuple[type, ...] = (
    Assign,
    BinOp,
    IntLiteral,
    FloatLiteral,
    StringLiteral,
    If,
    For,
    While,
    Return,
    Var,
    Block,
)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST traversals.

    visit() dispatches to visit_<NodeClass>. There is no silent default:
    a node class without a handler raises TypeError, which is how a new
    node variant left out of a traversal gets noticed.

    Usage:
        class MyVisitor(ASTVisitor):
            def visit_Assign(self, node):
                ...

        MyVisitor().visit(tree)
    """

    def visit(self, node: ASTNode):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode):
        raise TypeError(
            f"{self.__class__.__name__} has no handler for {node.__class__.__name__} nodes"
        )


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Renders an AST as an indented text tree.

    Control constructs show their parts under labelled sections
    (Condition:, Then:, ...); other nodes list their children directly.

    Usage:
        printer = ASTPrinter()
        print(printer.print_program(statements))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Render a single tree."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def print_program(self, statements) -> str:
        """Render a list of top-level statements under a Program root."""
        self.output = []
        self.indent_level = 0
        self._emit("Program")
        self._indent()
        for stmt in statements:
            self.visit(stmt)
        self._dedent()
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append("  " * self.indent_level + text)

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _emit_children(self, node: ASTNode) -> None:
        self._indent()
        for _, child in node.children():
            self.visit(child)
        self._dedent()

    def _emit_sections(self, node: ASTNode) -> None:
        self._indent()
        for label, child in node.children():
            self._emit(f"{label}:")
            self._indent()
            self.visit(child)
            self._dedent()
        self._dedent()

    def visit_Assign(self, node: Assign):
        prefix = f"{node.declared_type} " if node.declared_type else ""
        self._emit(f"AssignNode: {prefix}{node.name}")
        self._emit_children(node)

    def visit_BinOp(self, node: BinOp):
        self._emit(f"Binary Operation: {node.op}")
        self._emit_children(node)

    def visit_IntLiteral(self, node: IntLiteral):
        self._emit(f"Integer: {node.value}")

    def visit_FloatLiteral(self, node: FloatLiteral):
        self._emit(f"Float: {node}")

    def visit_StringLiteral(self, node: StringLiteral):
        self._emit(f'String: "{node.value}"')

    def visit_Var(self, node: Var):
        self._emit(f"VarNode: {node.name}")

    def visit_If(self, node: If):
        self._emit("If Statement")
        self._emit_sections(node)

    def visit_For(self, node: For):
        self._emit("For Loop")
        self._emit_sections(node)

    def visit_While(self, node: While):
        self._emit("While Loop")
        self._emit_sections(node)

    def visit_Return(self, node: Return):
        self._emit("Return")
        if node.value is None:
            self._indent()
            self._emit("(empty)")
            self._dedent()
        else:
            self._emit_children(node)

    def visit_Block(self, node: Block):
        self._emit("{Block}")
        self._emit_children(node)
