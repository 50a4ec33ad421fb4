"""Converts the parser's generic tree into the canonical rule tree."""

from .ast import BinaryExpression, Expression, Identifier, Literal, UnaryExpression
from .exceptions import UnsupportedExpressionError
from .tree import RuleNode

LOGICAL_OPERATORS = frozenset({"&&", "||"})
COMPARISON_OPERATORS = frozenset({">", ">=", "<", "<=", "==", "===", "!=", "!=="})
BINARY_OPERATORS = LOGICAL_OPERATORS | COMPARISON_OPERATORS
UNARY_OPERATORS = frozenset({"!", "-"})


class TreeBuilder:
    """Stateless structural transform from generic to canonical tree."""

    def build(self, node: Expression) -> RuleNode:
        """Build the canonical node for ``node`` and its descendants."""
        if isinstance(node, BinaryExpression):
            if node.operator not in BINARY_OPERATORS:
                raise UnsupportedExpressionError(f"BinaryExpression '{node.operator}'")
            return RuleNode.operator(node.operator, self.build(node.left), self.build(node.right))

        if isinstance(node, UnaryExpression):
            if node.operator not in UNARY_OPERATORS:
                raise UnsupportedExpressionError(f"UnaryExpression '{node.operator}'")
            return RuleNode.operator(node.operator, self.build(node.argument))

        if isinstance(node, Literal):
            if isinstance(node.value, bool):
                return RuleNode.boolean(node.value)
            return RuleNode.literal(str(node.value))

        if isinstance(node, Identifier):
            return RuleNode.identifier(node.name)

        raise UnsupportedExpressionError(type(node).__name__)


def build_tree(expression: Expression) -> RuleNode:
    """Convert a generic expression tree into a canonical rule tree."""
    return TreeBuilder().build(expression)
