"""
Derivative Package

Expression front end for single-variable mathematical formulas. Turns a
formula string into a validated abstract syntax tree that later symbolic
passes (differentiation, evaluation) can walk.

Architecture:
    derivative/
    ├── lexer/           # Tokenization of formula text
    └── parser/          # Parenthesis, function and precedence passes

Author: xwest
License: MIT
"""

import logging

__version__ = "0.1.0"
__author__ = "xwest"
__email__ = "dev@neuralscript.org"
__license__ = "MIT"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .lexer import Lexer, Token, TokenType, tokenize
from .parser import Parser, ParseError, parse, parse_string

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "ParseError",

    # Entry points
    "tokenize",
    "parse",
    "parse_string",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
