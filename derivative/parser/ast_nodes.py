"""
Abstract Syntax Tree node definitions for formulas.

Defines the closed set of node types a formula can parse to: leaves
(numbers, the variable, opaque constants, e), binary arithmetic, unary
negation and the nine unary functions. Nodes compare structurally and
support the visitor pattern for downstream passes such as
differentiation.

Ownership is strictly tree-shaped. Every node records the parent that
adopted it and refuses a second parent, so a finished tree never shares
a subtree between two owners.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Type, Union
from enum import Enum

from ..lexer.tokens import Token, TokenType


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Leaves
    NUMBER = "Number"
    VARIABLE = "Variable"
    CONSTANT = "Constant"
    E_CONSTANT = "EConstant"

    # Binary arithmetic
    ADD = "Add"
    SUB = "Sub"
    MUL = "Mul"
    DIV = "Div"
    POW = "Pow"

    # Unary
    NEG = "Neg"

    # Functions
    LN = "Ln"
    LOG = "Log"
    SIN = "Sin"
    COS = "Cos"
    TAN = "Tan"
    ARCSIN = "Arcsin"
    ARCCOS = "Arccos"
    ARCTAN = "Arctan"
    SQRT = "Sqrt"


class ASTVisitor:
    """
    Base visitor for read-only tree walks.

    ``visit`` dispatches to ``visit_<ClassName>`` (e.g. ``visit_Add``)
    and falls back to ``generic_visit``, which visits the children.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: 'ASTNode') -> Any:
        for child in node.children():
            self.visit(child)
        return None


class ASTNode(ABC):
    """Base class for all AST nodes."""

    node_type: ASTNodeType

    def __init__(self):
        self.parent: Optional['ASTNode'] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    def _payload(self) -> Tuple[Any, ...]:
        """Values stored on this node itself, not counting its children."""
        return ()

    @abstractmethod
    def _format(self, parts: List[str]) -> str:
        """Infix text for this node given its rendered children."""
        pass

    def set_parent(self, parent: 'ASTNode'):
        """Set the parent node. A node belongs to at most one parent."""
        if self.parent is not None:
            raise ValueError(
                f"{type(self).__name__} node is already owned by "
                f"{type(self.parent).__name__}; subtrees cannot be shared"
            )
        self.parent = parent

    def _adopt(self, *children: 'ASTNode'):
        """
        Take ownership of ``children``.

        Every child is checked before any is linked, so a rejected
        construction leaves all of them unowned.
        """
        for index, child in enumerate(children):
            if not isinstance(child, ASTNode):
                raise TypeError(f"expected an ASTNode child, got {type(child).__name__}")
            if child.parent is not None or any(child is seen for seen in children[:index]):
                raise ValueError(
                    f"{type(child).__name__} node is already owned; "
                    "subtrees cannot be shared"
                )
        for child in children:
            child.set_parent(self)

    @property
    def is_leaf(self) -> bool:
        return not self.children()

    def __eq__(self, other) -> bool:
        """Structural (node-by-node) equality; parent links are ignored."""
        if type(self) is not type(other):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            mine, theirs = pairs.pop()
            if type(mine) is not type(theirs) or mine._payload() != theirs._payload():
                return False
            # Same node type means same arity
            pairs.extend(zip(mine.children(), theirs.children()))
        return True

    def __hash__(self) -> int:
        return fold_nodes(
            self,
            lambda node, parts: hash((type(node).__name__, node._payload(), tuple(parts)))
        )

    def __repr__(self) -> str:
        def render(node: 'ASTNode', parts: List[str]) -> str:
            args = [repr(value) for value in node._payload()] + parts
            return f"{type(node).__name__}({', '.join(args)})"

        return fold_nodes(self, render)

    def __str__(self) -> str:
        return fold_nodes(self, lambda node, parts: node._format(parts))


# ============================================================================
# Leaves
# ============================================================================

class Number(ASTNode):
    """Numeric literal."""
    node_type = ASTNodeType.NUMBER

    def __init__(self, value: float):
        super().__init__()
        self.value = float(value)

    def children(self) -> List[ASTNode]:
        return []

    def _payload(self) -> Tuple[Any, ...]:
        return (self.value,)

    def _format(self, parts: List[str]) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)


class Variable(ASTNode):
    """Reference to the designated variable."""
    node_type = ASTNodeType.VARIABLE

    def __init__(self, name: str):
        super().__init__()
        self.name = name

    def children(self) -> List[ASTNode]:
        return []

    def _payload(self) -> Tuple[Any, ...]:
        return (self.name,)

    def _format(self, parts: List[str]) -> str:
        return self.name


class Constant(ASTNode):
    """Opaque named constant (any identifier other than the variable)."""
    node_type = ASTNodeType.CONSTANT

    def __init__(self, name: str):
        super().__init__()
        self.name = name

    def children(self) -> List[ASTNode]:
        return []

    def _payload(self) -> Tuple[Any, ...]:
        return (self.name,)

    def _format(self, parts: List[str]) -> str:
        return self.name


class EConstant(ASTNode):
    """Euler's number e."""
    node_type = ASTNodeType.E_CONSTANT

    def children(self) -> List[ASTNode]:
        return []

    def _format(self, parts: List[str]) -> str:
        return "e"


# ============================================================================
# Binary arithmetic
# ============================================================================

class BinaryOp(ASTNode):
    """Binary operation owning exactly two children."""
    operator: str

    def __init__(self, left: ASTNode, right: ASTNode):
        super().__init__()
        self._adopt(left, right)
        self.left = left
        self.right = right

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]

    def _format(self, parts: List[str]) -> str:
        left, right = parts
        return f"({left} {self.operator} {right})"


class Add(BinaryOp):
    node_type = ASTNodeType.ADD
    operator = "+"


class Sub(BinaryOp):
    node_type = ASTNodeType.SUB
    operator = "-"


class Mul(BinaryOp):
    node_type = ASTNodeType.MUL
    operator = "*"


class Div(BinaryOp):
    node_type = ASTNodeType.DIV
    operator = "/"


class Pow(BinaryOp):
    node_type = ASTNodeType.POW
    operator = "^"


# ============================================================================
# Unary negation
# ============================================================================

class Neg(ASTNode):
    """Unary minus."""
    node_type = ASTNodeType.NEG

    def __init__(self, operand: ASTNode):
        super().__init__()
        self._adopt(operand)
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return [self.operand]

    def _format(self, parts: List[str]) -> str:
        return f"-({parts[0]})"


# ============================================================================
# Unary functions
# ============================================================================

class FunctionApplication(ASTNode):
    """A recognized unary function applied to exactly one argument."""
    function_name: str

    def __init__(self, argument: ASTNode):
        super().__init__()
        self._adopt(argument)
        self.argument = argument

    def children(self) -> List[ASTNode]:
        return [self.argument]

    def _format(self, parts: List[str]) -> str:
        return f"{self.function_name}({parts[0]})"


class Ln(FunctionApplication):
    node_type = ASTNodeType.LN
    function_name = "ln"


class Log(FunctionApplication):
    node_type = ASTNodeType.LOG
    function_name = "log"


class Sin(FunctionApplication):
    node_type = ASTNodeType.SIN
    function_name = "sin"


class Cos(FunctionApplication):
    node_type = ASTNodeType.COS
    function_name = "cos"


class Tan(FunctionApplication):
    node_type = ASTNodeType.TAN
    function_name = "tan"


class Arcsin(FunctionApplication):
    node_type = ASTNodeType.ARCSIN
    function_name = "arcsin"


class Arccos(FunctionApplication):
    node_type = ASTNodeType.ARCCOS
    function_name = "arccos"


class Arctan(FunctionApplication):
    node_type = ASTNodeType.ARCTAN
    function_name = "arctan"


class Sqrt(FunctionApplication):
    node_type = ASTNodeType.SQRT
    function_name = "sqrt"


# ============================================================================
# Lookup tables and helpers
# ============================================================================

# A parser unit is either an unconsumed token or an already-resolved node
Unit = Union[Token, ASTNode]

FUNCTION_NODES: Dict[TokenType, Type[FunctionApplication]] = {
    TokenType.LN: Ln,
    TokenType.LOG: Log,
    TokenType.SIN: Sin,
    TokenType.COS: Cos,
    TokenType.TAN: Tan,
    TokenType.ARCSIN: Arcsin,
    TokenType.ARCCOS: Arccos,
    TokenType.ARCTAN: Arctan,
    TokenType.SQRT: Sqrt,
}

BINARY_NODES: Dict[TokenType, Type[BinaryOp]] = {
    TokenType.PLUS: Add,
    TokenType.MINUS: Sub,
    TokenType.MULTIPLY: Mul,
    TokenType.DIVIDE: Div,
    TokenType.POWER: Pow,
}


def leaf_from_token(token: Token) -> Optional[ASTNode]:
    """Convert a leaf token to its node, or None if the token is not a leaf."""
    if token.type == TokenType.NUMBER:
        return Number(token.value)
    if token.type == TokenType.VARIABLE:
        return Variable(token.value)
    if token.type == TokenType.CONSTANT:
        return Constant(token.value)
    if token.type == TokenType.E_CONSTANT:
        return EConstant()
    return None


def iter_nodes(root: ASTNode) -> Iterator[ASTNode]:
    """Yield every node of the tree in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def fold_nodes(root: ASTNode, combine: Callable[[ASTNode, List[Any]], Any]) -> Any:
    """
    Reduce a tree bottom-up without recursion.

    ``combine(node, parts)`` is called once per node, in post-order, with
    the already combined results of its children. The result for the
    root is returned.
    """
    results: Dict[int, Any] = {}
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        children = node.children()
        if expanded:
            parts = [results.pop(id(child)) for child in children]
            results[id(node)] = combine(node, parts)
        else:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children))
    return results[id(root)]
