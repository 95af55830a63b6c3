"""
Token definitions for the formula lexer.

This module defines every token type a formula can produce:
- Leaves (numbers, the designated variable, opaque constants, e)
- Arithmetic operators
- Parentheses
- Unary function keywords

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any, Optional


class TokenType(Enum):
    """
    Enumeration of all token types in a formula.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Leaves
    # ========================================================================
    NUMBER = auto()                 # 42, 3.14
    VARIABLE = auto()               # the designated variable, e.g. x
    CONSTANT = auto()               # any other identifier, e.g. a, k
    E_CONSTANT = auto()             # e

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # - (binary or unary)
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    POWER = auto()                  # ^

    # ========================================================================
    # Punctuation
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )

    # ========================================================================
    # Function keywords
    # ========================================================================
    SIN = auto()                    # sin
    COS = auto()                    # cos
    TAN = auto()                    # tan
    ARCSIN = auto()                 # arcsin
    ARCCOS = auto()                 # arccos
    ARCTAN = auto()                 # arctan
    LN = auto()                     # ln
    LOG = auto()                    # log
    SQRT = auto()                   # sqrt


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the formula text.

    Used for error reporting only.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents one lexical unit of a formula.

    Tokens compare by type and semantic value only. The raw lexeme and
    the source location are carried for diagnostics and never take part
    in equality, so a hand-built ``Token.variable("x")`` equals the one
    the lexer produced from ``"x"``.
    """
    type: TokenType
    value: Any = None                                           # float for NUMBER, name for VARIABLE/CONSTANT
    lexeme: str = field(default="", compare=False)              # Raw text from source
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.type.name}({self.value!r})"
        return self.type.name

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r})"
        return f"Token({self.type.name})"

    @classmethod
    def number(cls, value: float) -> "Token":
        return cls(TokenType.NUMBER, float(value), str(value))

    @classmethod
    def variable(cls, name: str) -> "Token":
        return cls(TokenType.VARIABLE, name, name)

    @classmethod
    def constant(cls, name: str) -> "Token":
        return cls(TokenType.CONSTANT, name, name)

    @classmethod
    def of(cls, token_type: TokenType) -> "Token":
        """Build a payload-free token (operator, paren, keyword, e)."""
        if token_type in PAYLOAD_TYPES:
            raise ValueError(f"{token_type.name} tokens carry a value, use the matching factory")
        return cls(token_type, None, TOKEN_TEXT.get(token_type, ""))

    @property
    def is_leaf(self) -> bool:
        """Check if this token resolves directly to a leaf node."""
        return self.type in LEAF_TYPES

    @property
    def is_operator(self) -> bool:
        """Check if this token is an arithmetic operator."""
        return self.type in OPERATOR_TYPES

    @property
    def is_function(self) -> bool:
        """Check if this token is a unary function keyword."""
        return self.type in FUNCTION_TYPES


# Lookup tables for token recognition

LEAF_TYPES = frozenset({
    TokenType.NUMBER,
    TokenType.VARIABLE,
    TokenType.CONSTANT,
    TokenType.E_CONSTANT,
})

PAYLOAD_TYPES = frozenset({
    TokenType.NUMBER,
    TokenType.VARIABLE,
    TokenType.CONSTANT,
})

OPERATOR_TYPES = frozenset({
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.MULTIPLY,
    TokenType.DIVIDE,
    TokenType.POWER,
})

FUNCTION_TYPES = frozenset({
    TokenType.SIN,
    TokenType.COS,
    TokenType.TAN,
    TokenType.ARCSIN,
    TokenType.ARCCOS,
    TokenType.ARCTAN,
    TokenType.LN,
    TokenType.LOG,
    TokenType.SQRT,
})

# Identifiers with a fixed meaning (case-sensitive)
KEYWORDS = {
    "sin": TokenType.SIN,
    "cos": TokenType.COS,
    "tan": TokenType.TAN,
    "arcsin": TokenType.ARCSIN,
    "arccos": TokenType.ARCCOS,
    "arctan": TokenType.ARCTAN,
    "ln": TokenType.LN,
    "log": TokenType.LOG,
    "sqrt": TokenType.SQRT,
    "e": TokenType.E_CONSTANT,
}

OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "^": TokenType.POWER,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
}

# Canonical source text for payload-free tokens
TOKEN_TEXT = {
    **{token_type: text for text, token_type in OPERATORS.items()},
    **{token_type: text for text, token_type in KEYWORDS.items()},
}
