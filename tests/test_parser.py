"""
Test suite for the formula parser.

Tests cover:
- Leaves and operator precedence
- Unary minus handling
- Parenthesis resolution and nesting
- Function binding
- Error kinds for malformed input

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from derivative.lexer.lexer import tokenize
from derivative.lexer.tokens import Token, TokenType
from derivative.parser.parser import Parser, parse, parse_string
from derivative.parser.ast_nodes import (
    ASTNode, Number, Variable, Constant, EConstant,
    Add, Sub, Mul, Div, Pow, Neg,
    Ln, Log, Sin, Cos, Tan, Arcsin, Arccos, Arctan, Sqrt,
)
from derivative.parser.errors import (
    ParseError, ParseErrorKind, UnevenParentheses, MissingFunctionArgument,
    InvalidExpression
)


def p(source: str, variable: str = "x") -> ASTNode:
    return parse_string(source, variable)


class TestLeaves(unittest.TestCase):
    """Single-unit expressions."""

    def test_number(self):
        self.assertEqual(p("42"), Number(42.0))

    def test_variable(self):
        self.assertEqual(p("x"), Variable("x"))

    def test_constant(self):
        self.assertEqual(p("k"), Constant("k"))

    def test_e(self):
        self.assertEqual(p("e"), EConstant())

    def test_parenthesized_leaf(self):
        self.assertEqual(p("((x))"), Variable("x"))


class TestPrecedence(unittest.TestCase):
    """Operator precedence and split-point selection."""

    def test_mul_binds_tighter_than_add(self):
        self.assertEqual(p("2 + 3 * 4"), Add(Number(2), Mul(Number(3), Number(4))))
        self.assertEqual(p("2 * 3 + 4"), Add(Mul(Number(2), Number(3)), Number(4)))

    def test_pow_binds_tighter_than_mul(self):
        self.assertEqual(p("2 * x ^ 3"), Mul(Number(2), Pow(Variable("x"), Number(3))))

    def test_additive_splits_at_first_operator(self):
        """The first top-level + or - is the split point."""
        self.assertEqual(
            p("a - b + c"),
            Sub(Constant("a"), Add(Constant("b"), Constant("c")))
        )
        self.assertEqual(
            p("a + b - c"),
            Add(Constant("a"), Sub(Constant("b"), Constant("c")))
        )

    def test_multiplicative_splits_at_first_operator(self):
        self.assertEqual(
            p("a / b * c"),
            Div(Constant("a"), Mul(Constant("b"), Constant("c")))
        )

    def test_power_splits_at_first_operator(self):
        self.assertEqual(
            p("2 ^ 3 ^ 4"),
            Pow(Number(2), Pow(Number(3), Number(4)))
        )

    def test_long_flat_sum(self):
        """Right-hand chains parse without growing the call stack."""
        tree = p("+".join(["1"] * 1000))
        depth = 0
        while isinstance(tree, Add):
            self.assertEqual(tree.left, Number(1))
            tree = tree.right
            depth += 1
        self.assertEqual(depth, 999)
        self.assertEqual(tree, Number(1))

    def test_long_mixed_chain(self):
        tree = p(" - ".join(["x * 2"] * 1000))
        self.assertIsInstance(tree, Sub)
        self.assertEqual(tree.left, Mul(Variable("x"), Number(2)))

    def test_long_chain_error_is_parse_error(self):
        with self.assertRaises(InvalidExpression):
            p("+".join(["1"] * 1000) + "+")

    def test_parens_override_precedence(self):
        self.assertEqual(p("(2 + 3) * 4"), Mul(Add(Number(2), Number(3)), Number(4)))
        self.assertEqual(p("(2 ^ 3) ^ 4"), Pow(Pow(Number(2), Number(3)), Number(4)))


class TestUnaryMinus(unittest.TestCase):
    """Leading and post-operator minus signs."""

    def test_leading_minus(self):
        self.assertEqual(p("-x"), Neg(Variable("x")))

    def test_minus_binds_tighter_than_power(self):
        self.assertEqual(p("-3^2"), Pow(Neg(Number(3)), Number(2)))
        self.assertEqual(p("-e^x"), Pow(Neg(EConstant()), Variable("x")))

    def test_repeated_leading_minus(self):
        tree = p("-" * 2000 + "x")
        for _ in range(2000):
            self.assertIsInstance(tree, Neg)
            tree = tree.operand
        self.assertEqual(tree, Variable("x"))

    def test_leading_minus_with_addition(self):
        self.assertEqual(p("-x + 1"), Add(Neg(Variable("x")), Number(1)))

    def test_leading_minus_with_product(self):
        self.assertEqual(p("-2 * x"), Mul(Neg(Number(2)), Variable("x")))

    def test_minus_after_operator_is_sign(self):
        self.assertEqual(p("2 * -x"), Mul(Number(2), Neg(Variable("x"))))
        self.assertEqual(p("2 ^ -x"), Pow(Number(2), Neg(Variable("x"))))
        self.assertEqual(p("2 / -x"), Div(Number(2), Neg(Variable("x"))))

    def test_subtract_negative(self):
        self.assertEqual(p("x - -1"), Sub(Variable("x"), Neg(Number(1))))
        self.assertEqual(p("x + -1"), Add(Variable("x"), Neg(Number(1))))

    def test_double_negation(self):
        self.assertEqual(p("--x"), Neg(Neg(Variable("x"))))

    def test_negated_group(self):
        self.assertEqual(p("-(x + 1)"), Neg(Add(Variable("x"), Number(1))))


class TestFunctions(unittest.TestCase):
    """Function binding."""

    def test_each_function(self):
        cases = {
            "sin": Sin, "cos": Cos, "tan": Tan,
            "arcsin": Arcsin, "arccos": Arccos, "arctan": Arctan,
            "ln": Ln, "log": Log, "sqrt": Sqrt,
        }
        for name, node_class in cases.items():
            with self.subTest(function=name):
                self.assertEqual(p(f"{name}(x)"), node_class(Variable("x")))

    def test_function_of_expression(self):
        self.assertEqual(p("sin(2*x)"), Sin(Mul(Number(2), Variable("x"))))

    def test_function_in_expression(self):
        self.assertEqual(
            p("2 * sin(x) + cos(x)"),
            Add(Mul(Number(2), Sin(Variable("x"))), Cos(Variable("x")))
        )

    def test_function_binds_tighter_than_power(self):
        self.assertEqual(p("sin(x)^2"), Pow(Sin(Variable("x")), Number(2)))

    def test_nested_functions(self):
        self.assertEqual(p("ln(sqrt(x))"), Ln(Sqrt(Variable("x"))))

    def test_deep_composition(self):
        """Functions, powers and nested groups compose into one tree."""
        expected = Arcsin(
            Pow(
                EConstant(),
                Cos(Ln(Pow(Variable("x"), Pow(Number(3), Variable("x")))))
            )
        )
        self.assertEqual(p("arcsin(e^(cos(ln(x^(3^x)))))"), expected)

    def test_missing_argument_alone(self):
        with self.assertRaises(MissingFunctionArgument) as ctx:
            p("sin")
        self.assertEqual(ctx.exception.kind, ParseErrorKind.MISSING_FUNCTION_ARGUMENT)
        self.assertEqual(ctx.exception.token, Token.of(TokenType.SIN))

    def test_missing_argument_followed_by_token(self):
        with self.assertRaises(MissingFunctionArgument):
            p("sin x")
        with self.assertRaises(MissingFunctionArgument):
            p("cos + (x)")
        with self.assertRaises(MissingFunctionArgument):
            p("sin cos(x)")

    def test_missing_argument_at_end(self):
        with self.assertRaises(MissingFunctionArgument):
            p("x + ln")


class TestParentheses(unittest.TestCase):
    """Parenthesis balance."""

    def test_unclosed(self):
        with self.assertRaises(UnevenParentheses) as ctx:
            p("(x + 1")
        self.assertEqual(ctx.exception.kind, ParseErrorKind.UNEVEN_PARENTHESES)
        self.assertEqual(ctx.exception.token.location.offset, 0)

    def test_unopened(self):
        with self.assertRaises(UnevenParentheses) as ctx:
            p("x + 1)")
        self.assertEqual(ctx.exception.token.location.offset, 5)

    def test_close_before_open(self):
        with self.assertRaises(UnevenParentheses):
            p(")x(")

    def test_extra_close_after_empty_group(self):
        """Balance is checked before any group is parsed."""
        with self.assertRaises(UnevenParentheses):
            p("()2+3)")

    def test_nested_groups(self):
        self.assertEqual(
            p("((x + 1) * (x - 1))"),
            Mul(Add(Variable("x"), Number(1)), Sub(Variable("x"), Number(1)))
        )

    def test_empty_group(self):
        with self.assertRaises(InvalidExpression):
            p("()")


class TestInvalidExpressions(unittest.TestCase):
    """Sequences that match no grammar shape."""

    def assertInvalid(self, source: str):
        with self.assertRaises(InvalidExpression) as ctx:
            p(source)
        self.assertEqual(ctx.exception.kind, ParseErrorKind.INVALID_EXPRESSION)
        self.assertIsInstance(ctx.exception, ParseError)

    def test_empty(self):
        self.assertInvalid("")
        self.assertInvalid("   ")

    def test_lone_operator(self):
        self.assertInvalid("+")
        self.assertInvalid("-")
        self.assertInvalid("*")

    def test_missing_operand(self):
        self.assertInvalid("x +")
        self.assertInvalid("* x")
        self.assertInvalid("x ^")

    def test_juxtaposition(self):
        self.assertInvalid("2 x")
        self.assertInvalid("2(x)")
        self.assertInvalid("(x)(x)")

    def test_error_has_diagnostic(self):
        with self.assertRaises(InvalidExpression) as ctx:
            p("2 x")
        self.assertEqual(ctx.exception.diagnostic.code, "P005")
        self.assertIn("Invalid expression", str(ctx.exception))


class TestPasses(unittest.TestCase):
    """Each pass on its own."""

    def setUp(self):
        self.parser = Parser([])

    def test_resolve_parentheses(self):
        units = self.parser.resolve_parentheses(tokenize("sin(x) + (2)", "x"))
        self.assertEqual(units, [
            Token.of(TokenType.SIN),
            Variable("x"),
            Token.of(TokenType.PLUS),
            Number(2),
        ])

    def test_resolve_functions(self):
        units = self.parser.resolve_functions([
            Token.of(TokenType.SIN), Variable("x"), Token.of(TokenType.PLUS), Number(2)
        ])
        self.assertEqual(units, [Sin(Variable("x")), Token.of(TokenType.PLUS), Number(2)])

    def test_resolve_functions_passthrough(self):
        units = [Number(1), Token.of(TokenType.MULTIPLY), Constant("a")]
        self.assertEqual(self.parser.resolve_functions(units), units)

    def test_build_ast_with_resolved_nodes(self):
        node = self.parser.build_ast([Sin(Variable("x")), Token.of(TokenType.POWER), Number(2)])
        self.assertEqual(node, Pow(Sin(Variable("x")), Number(2)))

    def test_build_ast_rejects_non_leaf_token(self):
        with self.assertRaises(InvalidExpression):
            self.parser.build_ast([Token.of(TokenType.LEFT_PAREN)])


class TestEntryPoints(unittest.TestCase):
    """parse / Parser / hand-built tokens."""

    def test_parse_hand_built_tokens(self):
        tokens = [Token.variable("x"), Token.of(TokenType.POWER), Token.number(2)]
        self.assertEqual(parse(tokens), Pow(Variable("x"), Number(2)))

    def test_parser_is_deterministic(self):
        tokens = tokenize("arcsin(e^(cos(ln(x^(3^x))))) - 2*k/x", "x")
        parser = Parser(tokens)
        first = parser.parse()
        second = parser.parse()
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertEqual(parse(tokens), first)

    def test_parse_does_not_consume_tokens(self):
        tokens = tokenize("x + 1", "x")
        parse(tokens)
        self.assertEqual(len(tokens), 3)

    def test_custom_variable(self):
        self.assertEqual(p("t * x", "t"), Mul(Variable("t"), Constant("x")))


if __name__ == '__main__':
    unittest.main()
