"""
Formula parser

Multi-pass structural parser. The token stream is reduced to a single
AST node in three passes:

1. Parenthesis resolution: every balanced ``(...)`` group is parsed
   recursively through the whole pipeline and replaced by its node.
2. Function binding: each function keyword swallows the node right
   after it.
3. Precedence resolution: the remaining sequence is split repeatedly
   at the lowest-precedence operator, searching left to right for the
   first occurrence.

Between passes the working sequence holds units, each either an
unconsumed Token or an already-resolved ASTNode.

Author: xwest
"""

import logging
from typing import FrozenSet, List, Optional, Sequence, Tuple, Type

from ..lexer.tokens import Token, TokenType, OPERATOR_TYPES
from ..lexer.lexer import tokenize
from .ast_nodes import (
    ASTNode, Neg, Unit, FUNCTION_NODES, BINARY_NODES, leaf_from_token
)
from .errors import (
    create_uneven_parentheses_error, create_missing_argument_error,
    create_invalid_expression_error
)

logger = logging.getLogger(__name__)

ADDITIVE = frozenset({TokenType.PLUS, TokenType.MINUS})
MULTIPLICATIVE = frozenset({TokenType.MULTIPLY, TokenType.DIVIDE})
EXPONENT = frozenset({TokenType.POWER})
NEGATION = frozenset({TokenType.MINUS})


def _is_token(unit: Unit, token_types: FrozenSet[TokenType]) -> bool:
    return isinstance(unit, Token) and unit.type in token_types


class Parser:
    """
    Formula parser.

    Holds one token sequence; ``parse`` runs the three passes over it
    and returns the root node. The parser keeps no state between calls
    so one instance can be parsed repeatedly.
    """

    def __init__(self, tokens: Sequence[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the lexer (or built by hand)
        """
        self.tokens = list(tokens)

    def parse(self) -> ASTNode:
        """
        Parse the token stream into an AST.

        Returns:
            Root node of the expression tree

        Raises:
            UnevenParentheses: If parenthesis nesting does not balance
            MissingFunctionArgument: If a function keyword has no argument
            InvalidExpression: If the tokens do not form an expression
        """
        return self._parse_tokens(self.tokens)

    def _parse_tokens(self, tokens: Sequence[Token]) -> ASTNode:
        units = self.resolve_parentheses(tokens)
        units = self.resolve_functions(units)
        return self.build_ast(units)

    # ------------------------------------------------------------------
    # Pass 1: parentheses
    # ------------------------------------------------------------------

    def resolve_parentheses(self, tokens: Sequence[Token]) -> List[Unit]:
        """Replace every top-level parenthesized group with its parsed node."""
        self._check_balance(tokens)

        units: List[Unit] = []
        group: List[Token] = []
        depth = 0

        for token in tokens:
            if token.type == TokenType.LEFT_PAREN:
                # Inner parens stay in the group for the recursive parse
                if depth > 0:
                    group.append(token)
                depth += 1
            elif token.type == TokenType.RIGHT_PAREN:
                depth -= 1
                if depth == 0:
                    logger.debug("resolving group of %d tokens", len(group))
                    units.append(self._parse_tokens(group))
                    group = []
                else:
                    group.append(token)
            elif depth == 0:
                units.append(token)
            else:
                group.append(token)

        return units

    @staticmethod
    def _check_balance(tokens: Sequence[Token]):
        """Fail before any recursion if nesting goes negative or stays open."""
        depth = 0
        opener: Optional[Token] = None
        for token in tokens:
            if token.type == TokenType.LEFT_PAREN:
                if depth == 0:
                    opener = token
                depth += 1
            elif token.type == TokenType.RIGHT_PAREN:
                depth -= 1
                if depth < 0:
                    logger.debug("unmatched ')' at %s", token.location)
                    raise create_uneven_parentheses_error(token)
        if depth != 0:
            logger.debug("%d unclosed '('", depth)
            raise create_uneven_parentheses_error(opener)

    # ------------------------------------------------------------------
    # Pass 2: function binding
    # ------------------------------------------------------------------

    def resolve_functions(self, units: Sequence[Unit]) -> List[Unit]:
        """Bind each function keyword to the resolved node right after it."""
        resolved: List[Unit] = []
        index = 0

        while index < len(units):
            unit = units[index]
            if isinstance(unit, Token) and unit.is_function:
                argument = units[index + 1] if index + 1 < len(units) else None
                if not isinstance(argument, ASTNode):
                    raise create_missing_argument_error(unit)
                resolved.append(FUNCTION_NODES[unit.type](argument))
                # The argument is consumed along with the keyword
                index += 2
                continue

            resolved.append(unit)
            index += 1

        return resolved

    # ------------------------------------------------------------------
    # Pass 3: precedence
    # ------------------------------------------------------------------

    def build_ast(self, units: Sequence[Unit]) -> ASTNode:
        """
        Resolve a parenthesis- and function-free unit sequence to one node.

        Additive operators are tried first, then multiplicative, then
        power, and a leading minus last. Each level splits at its first
        occurrence scanning left to right; index 0 is never a split point.

        Power is tried before the leading minus on purpose, so the sign
        binds to the base: ``-3^2`` is ``Pow(Neg(3), 2)`` and ``-e^x`` is
        ``Pow(Neg(e), x)``.

        Only the left side of a split is resolved by recursion. The right
        side and any leading minus signs are unrolled in a loop, so a long
        flat chain like ``1 + 1 + ... + 1`` needs constant stack depth.
        """
        # Wrappers still to apply around the node built from ``rest``:
        # (node class, left operand), with no left operand for Neg
        pending: List[Tuple[Type[ASTNode], Optional[ASTNode]]] = []
        rest = units

        while True:
            if not rest:
                raise create_invalid_expression_error("empty expression")

            if len(rest) == 1:
                node = self._resolve_single(rest[0])
                break

            index = self._find_split(rest, ADDITIVE, skip_unary_minus=True)
            if index is None:
                index = self._find_split(rest, MULTIPLICATIVE)
            if index is None:
                index = self._find_split(rest, EXPONENT)
            if index is not None:
                left = self.build_ast(rest[:index])
                pending.append((BINARY_NODES[rest[index].type], left))
                rest = rest[index + 1:]
                continue

            if _is_token(rest[0], NEGATION):
                pending.append((Neg, None))
                rest = rest[1:]
                continue

            first_token = next((unit for unit in rest if isinstance(unit, Token)), None)
            raise create_invalid_expression_error(
                "no operator to split on", first_token
            )

        for node_class, left in reversed(pending):
            node = node_class(node) if left is None else node_class(left, node)
        return node

    @staticmethod
    def _resolve_single(unit: Unit) -> ASTNode:
        if isinstance(unit, ASTNode):
            return unit

        leaf = leaf_from_token(unit)
        if leaf is None:
            raise create_invalid_expression_error(
                f"'{unit.lexeme or unit.type.name}' cannot stand alone", unit
            )
        return leaf

    @staticmethod
    def _find_split(units: Sequence[Unit], operators: FrozenSet[TokenType],
                    skip_unary_minus: bool = False) -> Optional[int]:
        """Index of the first operator in ``operators``, or None."""
        for index in range(1, len(units)):
            unit = units[index]
            if not _is_token(unit, operators):
                continue
            # A minus right after another operator is a sign, not a subtraction
            if (skip_unary_minus and unit.type == TokenType.MINUS
                    and _is_token(units[index - 1], OPERATOR_TYPES)):
                continue
            return index
        return None


def parse(tokens: Sequence[Token]) -> ASTNode:
    """
    Convenience function to parse a token sequence.

    Raises:
        ParseError: The first failure encountered (one of its subclasses)
    """
    return Parser(tokens).parse()


def parse_string(source: str, variable: str, filename: str = "<formula>") -> ASTNode:
    """
    Tokenize and parse a formula in one step.

    Raises:
        LexerError: If a numeric literal is malformed
        ParseError: If the formula does not parse
    """
    return parse(tokenize(source, variable, filename))
