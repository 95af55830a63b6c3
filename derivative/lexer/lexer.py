"""
Formula lexer - turns formula text into tokens

Single left-to-right pass with one character of lookahead. Anything the
lexer does not recognize (whitespace, stray symbols, underscores) is
consumed and dropped without a token.

xwest
"""

import logging
import string
from typing import List

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS
from .errors import create_invalid_number_error

logger = logging.getLogger(__name__)

DIGITS = frozenset(string.digits)
NUMBER_CHARS = frozenset(string.digits + ".")
IDENTIFIER_CHARS = frozenset(string.ascii_letters)


class Lexer:
    """
    Formula lexical analyzer.

    Converts formula text into a list of tokens. The designated variable
    name decides which identifier becomes a VARIABLE token; every other
    identifier that is not a keyword becomes an opaque CONSTANT.
    """

    def __init__(self, source: str, variable: str, filename: str = "<formula>"):
        """
        Initialize the lexer with formula text.

        Args:
            source: Formula text
            variable: Name of the designated variable
            filename: Name used in diagnostics
        """
        self.source = source
        self.variable = variable
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire formula.

        Returns:
            List of tokens in source order (no end marker)

        Raises:
            LexerError: If a numeric literal cannot be converted
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []

        while self.pos < len(self.source):
            token = self._next_token()
            if token is not None:
                self.tokens.append(token)

        logger.debug("tokenized %r into %d tokens", self.source, len(self.tokens))
        return self.tokens

    def _next_token(self):
        """Get the next token, or None if the current character is skipped."""
        current_char = self.source[self.pos]
        location = self._location()

        if current_char in DIGITS:
            return self._tokenize_number(location)

        if current_char in IDENTIFIER_CHARS:
            return self._tokenize_identifier(location)

        token_type = OPERATORS.get(current_char)
        self._advance()
        if token_type is None:
            return None
        return Token(token_type, None, current_char, location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Tokenize a run of digits and decimal points."""
        start_pos = self.pos
        while self.pos < len(self.source) and self.source[self.pos] in NUMBER_CHARS:
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        try:
            value = float(lexeme)
        except ValueError as e:
            logger.debug("invalid numeric literal %r at %s", lexeme, location)
            raise create_invalid_number_error(
                lexeme,
                location,
                "A number is a run of digits with at most one decimal point"
            ) from e

        return Token(TokenType.NUMBER, value, lexeme, location)

    def _tokenize_identifier(self, location: SourceLocation) -> Token:
        """Tokenize a run of letters as variable, keyword or constant."""
        start_pos = self.pos
        while self.pos < len(self.source) and self.source[self.pos] in IDENTIFIER_CHARS:
            self._advance()

        lexeme = self.source[start_pos:self.pos]

        # The designated variable wins over keywords
        if lexeme == self.variable:
            return Token(TokenType.VARIABLE, lexeme, lexeme, location)

        token_type = KEYWORDS.get(lexeme)
        if token_type is not None:
            return Token(token_type, None, lexeme, location)

        return Token(TokenType.CONSTANT, lexeme, lexeme, location)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1


def tokenize(source: str, variable: str, filename: str = "<formula>") -> List[Token]:
    """
    Convenience function to tokenize a formula string.

    Args:
        source: Formula text
        variable: Name of the designated variable
        filename: Name used in diagnostics

    Returns:
        List of tokens

    Raises:
        LexerError: If a numeric literal is malformed
    """
    return Lexer(source, variable, filename).tokenize()
