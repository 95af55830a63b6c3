"""
Derivative Parser Package

Multi-pass structural parser for formulas. Resolves parentheses, then
function application, then operator precedence, producing a strictly
tree-shaped AST for later symbolic passes.

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse, parse_string
from .errors import (
    ParseError, ParseErrorKind, UnevenParentheses, MissingFunctionArgument,
    InvalidExpression
)

__all__ = [
    # Core parser
    "Parser", "parse", "parse_string",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "iter_nodes", "fold_nodes",
    "Number", "Variable", "Constant", "EConstant",
    "BinaryOp", "Add", "Sub", "Mul", "Div", "Pow", "Neg",
    "FunctionApplication", "Ln", "Log", "Sin", "Cos", "Tan",
    "Arcsin", "Arccos", "Arctan", "Sqrt",

    # Error handling
    "ParseError", "ParseErrorKind", "UnevenParentheses",
    "MissingFunctionArgument", "InvalidExpression",
]
