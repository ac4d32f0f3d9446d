"""
MiniTac Compiler
================

This package implements a small compiler for a C-like teaching language
with int, float and string variables, if/else, for, while and return.
It provides:

- A lexer (tokenizer) producing tokens on demand
- A recursive descent parser producing an AST
- A semantic analyzer checking declarations and types
- A constant folder rewriting literal arithmetic
- A generator emitting three-address code (TAC)

Pipeline
--------
    Source → Lexer → Parser → AST → Analyzer → Folder → TAC Generator → TAC

Usage
-----
>>> from minitac.compiler import Compiler
>>> result = Compiler().compile_source("float y = 2 + 1.5;")
>>> result.tac
['t0 = 2 + 1.5', 'y = t0']
"""

from minitac.compiler.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_file,
    compile_source,
)
from minitac.compiler.errors import (
    CompileError,
    LexError,
    UnterminatedStringError,
    ParseError,
    UnexpectedTokenError,
    MissingExpressionError,
    SemanticError,
    UndeclaredVariableError,
    DuplicateDeclarationError,
    TypeMismatchError,
    ConstantFoldError,
)
from minitac.compiler.lexer import Lexer, Token, TokenType, format_token_table, tokenize
from minitac.compiler.parser import Parser, parse_source
from minitac.compiler.semantic import SemanticAnalyzer, analyze
from minitac.compiler.folder import ConstantFolder, fold
from minitac.compiler.tacgen import TACGenerator, generate
from minitac.compiler.ast import (
    ASTNode,
    ASTVisitor,
    ASTPrinter,
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
    NODE_TYPES,
)

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    # Errors
    "CompileError",
    "LexError",
    "UnterminatedStringError",
    "ParseError",
    "UnexpectedTokenError",
    "MissingExpressionError",
    "SemanticError",
    "UndeclaredVariableError",
    "DuplicateDeclarationError",
    "TypeMismatchError",
    "ConstantFoldError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "format_token_table",
    # Parser
    "Parser",
    "parse_source",
    # Phases
    "SemanticAnalyzer",
    "analyze",
    "ConstantFolder",
    "fold",
    "TACGenerator",
    "generate",
    # AST Nodes
    "ASTNode",
    "ASTVisitor",
    "ASTPrinter",
    "Assign",
    "BinOp",
    "Block",
    "FloatLiteral",
    "For",
    "If",
    "IntLiteral",
    "Return",
    "StringLiteral",
    "Var",
    "While",
    "NODE_TYPES",
]
