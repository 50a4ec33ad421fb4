"""Rule Expression Engine API."""

from functools import partial
from typing import Sequence

from . import combiner
from .ast import Expression
from .builder import build_tree
from .evaluator import Evaluator, evaluate_rule
from .exceptions import (
    EmptyRuleSetError,
    EvaluationError,
    IncomparableOperandsError,
    MalformedTreeError,
    MissingFieldError,
    ParseError,
    RuleError,
    UnsupportedExpressionError,
    UnsupportedNodeError,
    UnsupportedOperatorError,
)
from .normalizer import normalize_rule
from .parser import DEFAULT_MAX_DEPTH, parse_expression
from .tree import NodeKind, OperandType, RuleNode


def parse_rule(rule_string: str, max_depth: int = DEFAULT_MAX_DEPTH) -> RuleNode:
    """Normalize, parse and build a rule string into a canonical tree."""
    return build_tree(parse_expression(normalize_rule(rule_string), max_depth=max_depth))


def combine_rules(rule_strings: Sequence[str], max_depth: int = DEFAULT_MAX_DEPTH) -> RuleNode:
    """Combine several rule strings into one canonical tree."""
    return combiner.combine_rules(rule_strings, partial(parse_rule, max_depth=max_depth))


__all__ = [
    "normalize_rule",
    "parse_expression",
    "build_tree",
    "parse_rule",
    "evaluate_rule",
    "combine_rules",
    "Evaluator",
    "Expression",
    "RuleNode",
    "NodeKind",
    "OperandType",
    "RuleError",
    "ParseError",
    "UnsupportedExpressionError",
    "EmptyRuleSetError",
    "EvaluationError",
    "UnsupportedOperatorError",
    "UnsupportedNodeError",
    "MissingFieldError",
    "IncomparableOperandsError",
    "MalformedTreeError",
]
