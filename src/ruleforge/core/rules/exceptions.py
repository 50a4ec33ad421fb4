"""Exceptions for rule parsing, building, combination and evaluation."""


class RuleError(Exception):
    """Base class for all rule-related errors."""
    pass


class ParseError(RuleError):
    """Raised when a rule string is not a syntactically valid expression."""
    def __init__(self, message: str, position: int | None = None, fragment: str | None = None):
        self.message = message
        self.position = position
        self.fragment = fragment
        super().__init__(f"{message} at position {position}" if position is not None else message)


class UnsupportedExpressionError(RuleError):
    """Raised when a parsed construct has no canonical tree representation."""
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported expression type: {kind}")


class EmptyRuleSetError(RuleError):
    """Raised when a combination is requested with zero rules."""
    def __init__(self) -> None:
        super().__init__("No rules provided for combination")


class EvaluationError(RuleError):
    """Raised when rule evaluation fails."""
    pass


class UnsupportedOperatorError(EvaluationError):
    """Raised when a tree holds an operator the evaluator does not know."""
    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"Unsupported operator: {operator}")


class UnsupportedNodeError(EvaluationError):
    """Raised when a tree holds a node kind other than operator or operand."""
    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unsupported AST node type: {kind}")


class MissingFieldError(EvaluationError):
    """Raised when an identifier is absent from the data record."""
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Field '{field}' is missing from the data record")


class IncomparableOperandsError(EvaluationError):
    """Raised when an ordering comparison mixes incompatible types."""
    pass


class MalformedTreeError(EvaluationError):
    """Raised when a serialized tree violates the node shape."""
    pass
