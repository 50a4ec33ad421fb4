"""Evaluator for canonical rule trees."""

from numbers import Real
from typing import Any, Mapping

from .exceptions import (
    EvaluationError,
    IncomparableOperandsError,
    MissingFieldError,
    UnsupportedNodeError,
    UnsupportedOperatorError,
)
from .tree import NUMERIC_TEXT, NodeKind, OperandType, RuleNode


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Value-and-type equality with no coercion between numbers, strings and booleans."""
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


class Evaluator:
    """Evaluates a canonical tree against a data record."""

    def __init__(self, data: Mapping[str, Any]):
        """Initialize the evaluator.

        Args:
            data: Flat mapping of field name to number, string or boolean.
        """
        self.data = data

    def evaluate(self, node: RuleNode) -> Any:
        """Evaluate a node."""
        if node.kind == NodeKind.OPERAND:
            return self._evaluate_operand(node)

        if node.kind == NodeKind.OPERATOR:
            return self._evaluate_operator(node)

        raise UnsupportedNodeError(node.kind)

    def _evaluate_operand(self, node: RuleNode) -> Any:
        if node.operand_type == OperandType.IDENTIFIER:
            if node.value not in self.data:
                raise MissingFieldError(node.value)
            return self.data[node.value]

        if node.operand_type == OperandType.BOOLEAN:
            return node.value == "true"

        # Quoted and bare numbers share one text form, so numeric text is a number
        if NUMERIC_TEXT.match(node.value):
            return float(node.value)
        return node.value

    def _evaluate_operator(self, node: RuleNode) -> Any:
        if node.left is None:
            raise EvaluationError(f"Operator '{node.value}' has no operand")

        left = self.evaluate(node.left)

        if node.right is None:
            return self._apply_unary(node.value, left)

        right = self.evaluate(node.right)
        return self._apply_binary(node.value, left, right)

    def _apply_unary(self, op: str, operand: Any) -> Any:
        if op == "!":
            return not bool(operand)
        if op == "-":
            if not _is_number(operand):
                raise EvaluationError(f"Cannot negate non-numeric value {operand!r}")
            return -operand

        raise UnsupportedOperatorError(op)

    def _apply_binary(self, op: str, left: Any, right: Any) -> Any:
        if op == "&&":
            return bool(left) and bool(right)
        if op == "||":
            return bool(left) or bool(right)

        if op in ("==", "==="):
            return strict_equals(left, right)
        if op in ("!=", "!=="):
            return not strict_equals(left, right)

        if op in (">", ">=", "<", "<="):
            self._check_comparable(op, left, right)
            if op == ">":
                return left > right
            if op == ">=":
                return left >= right
            if op == "<":
                return left < right
            return left <= right

        raise UnsupportedOperatorError(op)

    @staticmethod
    def _check_comparable(op: str, left: Any, right: Any) -> None:
        if _is_number(left) and _is_number(right):
            return
        if isinstance(left, str) and isinstance(right, str):
            return
        raise IncomparableOperandsError(
            f"Cannot compare {type(left).__name__} {op} {type(right).__name__}"
        )


def evaluate_rule(tree: RuleNode | Mapping[str, Any], data: Mapping[str, Any]) -> Any:
    """Evaluate a canonical tree (or its serialized form) against ``data``."""
    if not isinstance(tree, RuleNode):
        tree = RuleNode.from_dict(tree)
    return Evaluator(data).evaluate(tree)
