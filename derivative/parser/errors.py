"""
Error handling for the formula parser.

Every parse failure is terminal and reported to the caller immediately.
Control flow keys off ``ParseErrorKind``, a closed enumeration; the
message and diagnostic text are informational only.

Author: xwest
"""

from enum import Enum
from typing import Optional, List

from ..lexer.tokens import Token
from ..lexer.errors import Diagnostic


class ParseErrorKind(Enum):
    """The closed set of ways a parse can fail."""
    UNEVEN_PARENTHESES = "UnevenParentheses"
    MISSING_FUNCTION_ARGUMENT = "MissingFunctionArgument"
    INVALID_EXPRESSION = "InvalidExpression"


class ParseError(Exception):
    """
    Exception raised when the parser encounters a fatal syntax error.

    Contains the error kind, the offending token when one is known, and
    detailed diagnostic information for error reporting.
    """

    kind: ParseErrorKind

    def __init__(
        self,
        message: str,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.token = token
        self.diagnostic = Diagnostic(
            message=message,
            location=token.location if token is not None else None,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class UnevenParentheses(ParseError):
    """Parenthesis nesting went negative or never returned to zero."""
    kind = ParseErrorKind.UNEVEN_PARENTHESES


class MissingFunctionArgument(ParseError):
    """A function keyword is not immediately followed by a resolved node."""
    kind = ParseErrorKind.MISSING_FUNCTION_ARGUMENT


class InvalidExpression(ParseError):
    """A unit sequence matches none of the resolvable shapes."""
    kind = ParseErrorKind.INVALID_EXPRESSION


# Helper functions for creating common parser errors

def create_uneven_parentheses_error(token: Optional[Token] = None) -> UnevenParentheses:
    """Create an error for a closing paren without an opener, or an unclosed opener."""
    return UnevenParentheses(
        message="Uneven parentheses",
        token=token,
        code="P004",
        help_text="Every '(' needs a matching ')' and no ')' may appear before its '('.",
        suggestions=["Add the missing parenthesis", "Remove the extra parenthesis"]
    )


def create_missing_argument_error(function_token: Token) -> MissingFunctionArgument:
    """Create an error for a function keyword without a parenthesized argument."""
    name = function_token.lexeme or function_token.type.name.lower()
    return MissingFunctionArgument(
        message=f"No argument after function '{name}'",
        token=function_token,
        code="P006",
        help_text="Function arguments must be enclosed in parentheses directly after the name.",
        suggestions=[f"Write {name}(...)"]
    )


def create_invalid_expression_error(reason: str, token: Optional[Token] = None) -> InvalidExpression:
    """Create an error for a sequence that cannot be resolved to a node."""
    return InvalidExpression(
        message=f"Invalid expression: {reason}",
        token=token,
        code="P005",
        help_text=reason,
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )
