"""Canonical two-child rule tree.

This is the only representation of a rule that is stored or exchanged. Each
node is either an operator (internal) or an operand (leaf); operands carry a
tag telling literals apart from identifiers so evaluation never has to guess
from the text.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .exceptions import MalformedTreeError, UnsupportedNodeError

NUMERIC_TEXT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class NodeKind(str, Enum):
    """Kind of a canonical tree node."""

    OPERATOR = "operator"
    OPERAND = "operand"


class OperandType(str, Enum):
    """Syntactic origin of an operand node."""

    LITERAL = "literal"
    BOOLEAN = "boolean"
    IDENTIFIER = "identifier"


def _infer_operand_type(text: str) -> OperandType:
    if NUMERIC_TEXT.match(text):
        return OperandType.LITERAL
    if text in ("true", "false"):
        return OperandType.BOOLEAN
    return OperandType.IDENTIFIER


@dataclass(frozen=True)
class RuleNode:
    """A node of the canonical rule tree.

    Attributes:
        kind: Operator or operand.
        value: Operator symbol, or the operand's text (literal text or field name).
        left: Left child; the only child of a unary operator.
        right: Right child of a binary operator.
        operand_type: Literal, boolean or identifier for operands, None for operators.
    """

    kind: NodeKind
    value: str
    left: "RuleNode | None" = None
    right: "RuleNode | None" = None
    operand_type: OperandType | None = None

    @classmethod
    def operator(cls, symbol: str, left: "RuleNode", right: "RuleNode | None" = None) -> "RuleNode":
        """Create an operator node."""
        return cls(kind=NodeKind.OPERATOR, value=symbol, left=left, right=right)

    @classmethod
    def literal(cls, text: str) -> "RuleNode":
        """Create a literal operand node."""
        return cls(kind=NodeKind.OPERAND, value=text, operand_type=OperandType.LITERAL)

    @classmethod
    def boolean(cls, flag: bool) -> "RuleNode":
        """Create a ``true``/``false`` operand node."""
        return cls(
            kind=NodeKind.OPERAND,
            value="true" if flag else "false",
            operand_type=OperandType.BOOLEAN,
        )

    @classmethod
    def identifier(cls, name: str) -> "RuleNode":
        """Create an identifier operand node."""
        return cls(kind=NodeKind.OPERAND, value=name, operand_type=OperandType.IDENTIFIER)

    @property
    def is_operator(self) -> bool:
        return self.kind == NodeKind.OPERATOR

    @property
    def is_unary(self) -> bool:
        return self.is_operator and self.right is None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{kind, value, left, right, operand_type}`` shape."""
        return {
            "kind": self.kind.value,
            "value": self.value,
            "left": self.left.to_dict() if self.left is not None else None,
            "right": self.right.to_dict() if self.right is not None else None,
            "operand_type": self.operand_type.value if self.operand_type is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuleNode":
        """Rebuild a tree from its serialized form.

        Trees stored before operands were tagged have no ``operand_type``;
        their tag is decided here once: numeric text is a literal, ``true``
        and ``false`` are booleans, anything else an identifier.

        Raises:
            UnsupportedNodeError: If a node's kind is not operator or operand.
            MalformedTreeError: If a node violates the operator/operand shape.
        """
        if not isinstance(data, Mapping):
            raise MalformedTreeError(f"Tree node must be an object, got {type(data).__name__}")

        raw_kind = data.get("kind", data.get("type"))
        try:
            kind = NodeKind(raw_kind)
        except ValueError:
            raise UnsupportedNodeError(raw_kind) from None

        value = data.get("value")
        if value is None:
            raise MalformedTreeError(f"{kind.value} node is missing its value")
        value = ("true" if value else "false") if isinstance(value, bool) else str(value)

        left_data = data.get("left")
        right_data = data.get("right")

        if kind == NodeKind.OPERAND:
            if left_data is not None or right_data is not None:
                raise MalformedTreeError(f"Operand node '{value}' must not have children")
            raw_type = data.get("operand_type")
            if raw_type is None:
                operand_type = _infer_operand_type(value)
            else:
                try:
                    operand_type = OperandType(raw_type)
                except ValueError:
                    raise MalformedTreeError(f"Unknown operand type: {raw_type}") from None
            if operand_type == OperandType.BOOLEAN and value not in ("true", "false"):
                raise MalformedTreeError(f"Boolean operand must be true or false, got '{value}'")
            return cls(kind=kind, value=value, operand_type=operand_type)

        if left_data is None:
            raise MalformedTreeError(f"Operator node '{value}' has no left operand")
        return cls(
            kind=kind,
            value=value,
            left=cls.from_dict(left_data),
            right=cls.from_dict(right_data) if right_data is not None else None,
        )

    def depth(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        children = [child.depth() for child in (self.left, self.right) if child is not None]
        return 1 + max(children, default=0)

    def __str__(self) -> str:
        if not self.is_operator:
            if self.operand_type == OperandType.LITERAL and not NUMERIC_TEXT.match(self.value):
                return repr(self.value)
            return self.value
        if self.is_unary:
            return f"{self.value}({self.left})"
        return f"({self.left} {self.value} {self.right})"
