"""Tests for converting parsed expressions into canonical rule trees."""

import pytest

from ruleforge.core.rules import parse_rule
from ruleforge.core.rules.ast import CallExpression, Identifier, Literal
from ruleforge.core.rules.builder import build_tree
from ruleforge.core.rules.exceptions import UnsupportedExpressionError
from ruleforge.core.rules.tree import NodeKind, OperandType, RuleNode


def test_simple_comparison():
    tree = parse_rule("age > 30")

    assert tree == RuleNode.operator(">", RuleNode.identifier("age"), RuleNode.literal("30"))
    assert tree.left.operand_type == OperandType.IDENTIFIER
    assert tree.right.operand_type == OperandType.LITERAL


def test_keywords_and_single_equals():
    tree = parse_rule("age > 30 AND department = 'Sales'")

    assert tree.kind == NodeKind.OPERATOR
    assert tree.value == "&&"
    assert tree.left == parse_rule("age > 30")
    assert tree.right == RuleNode.operator(
        "==", RuleNode.identifier("department"), RuleNode.literal("Sales")
    )


def test_string_literal_is_tagged_literal():
    """Quoted text that looks like a name is still a literal."""
    tree = parse_rule("department == 'salary'")
    assert tree.right == RuleNode.literal("salary")


def test_boolean_literal_is_tagged_boolean():
    tree = parse_rule("active == true")
    assert tree.right == RuleNode.boolean(True)
    assert tree.right.operand_type == OperandType.BOOLEAN


def test_quoted_boolean_text_stays_a_literal():
    tree = parse_rule("status == 'false'")
    assert tree.right == RuleNode.literal("false")


def test_float_literal_text():
    tree = parse_rule("score >= 3.5")
    assert tree.right.value == "3.5"


def test_unary_not():
    tree = parse_rule("!(age > 30)")

    assert tree.value == "!"
    assert tree.is_unary
    assert tree.left == parse_rule("age > 30")
    assert tree.right is None


def test_unary_minus():
    tree = parse_rule("balance > -100")
    assert tree.right == RuleNode.operator("-", RuleNode.literal("100"))


def test_parsing_is_deterministic():
    rule = "((age > 30 AND department = 'Marketing')) AND (salary > 20000 OR experience > 5)"
    assert parse_rule(rule) == parse_rule(rule)


@pytest.mark.parametrize("rule", ["salary + 100 > 5000", "a * 2 == 4", "a % 2 == 0"])
def test_arithmetic_is_unsupported(rule):
    with pytest.raises(UnsupportedExpressionError, match="BinaryExpression"):
        parse_rule(rule)


def test_unary_plus_is_unsupported():
    with pytest.raises(UnsupportedExpressionError, match="UnaryExpression"):
        parse_rule("+age > 1")


def test_call_is_unsupported():
    with pytest.raises(UnsupportedExpressionError, match="CallExpression"):
        build_tree(CallExpression("contains", [Identifier("name"), Literal("x")]))


def test_array_is_unsupported():
    with pytest.raises(UnsupportedExpressionError, match="ArrayExpression"):
        parse_rule("tags == [1, 2]")
