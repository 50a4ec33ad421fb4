"""Generic expression tree produced by the parser."""

from dataclasses import dataclass, field
from typing import Any

@dataclass
class Expression:
    """Base class for all generic tree nodes."""
    pass

@dataclass
class Literal(Expression):
    """Represents a literal value (number, string, boolean)."""
    value: Any

@dataclass
class Identifier(Expression):
    """Represents a bare name referring to a data record field."""
    name: str

@dataclass
class BinaryExpression(Expression):
    """Represents a binary operation (e.g., a == b)."""
    operator: str
    left: Expression
    right: Expression

@dataclass
class UnaryExpression(Expression):
    """Represents a prefix operation (e.g., !a)."""
    operator: str
    argument: Expression

@dataclass
class CallExpression(Expression):
    """Represents a function call (e.g., contains(a, b))."""
    callee: str
    arguments: list[Expression] = field(default_factory=list)

@dataclass
class ArrayExpression(Expression):
    """Represents an array literal (e.g., [1, 2, 3])."""
    elements: list[Expression] = field(default_factory=list)
