"""
Derivative Lexer Package

Turns formula text into a flat token stream. The scan is deliberately
permissive: whitespace and unknown characters are dropped, unknown
identifiers become opaque constants.

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize
from .errors import LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "tokenize",
]
