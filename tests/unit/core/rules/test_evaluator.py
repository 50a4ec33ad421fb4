"""Tests for rule evaluation."""

import pytest

from ruleforge.core.rules import evaluate_rule, parse_rule
from ruleforge.core.rules.evaluator import Evaluator, strict_equals
from ruleforge.core.rules.exceptions import (
    EvaluationError,
    IncomparableOperandsError,
    MissingFieldError,
    UnsupportedNodeError,
    UnsupportedOperatorError,
)
from ruleforge.core.rules.tree import NodeKind, RuleNode


def _evaluate(rule: str, data: dict):
    return evaluate_rule(parse_rule(rule), data)


class TestComparisons:
    """Comparison operators against record fields."""

    def test_greater_than_true(self):
        assert _evaluate("age > 30", {"age": 35}) is True

    def test_greater_than_false(self):
        assert _evaluate("age > 30", {"age": 20}) is False

    @pytest.mark.parametrize(
        "rule,expected",
        [
            ("age >= 30", True),
            ("age <= 30", True),
            ("age < 30", False),
            ("age == 30", True),
            ("age === 30", True),
            ("age != 30", False),
            ("age !== 30", False),
        ],
    )
    def test_numeric_operators(self, rule, expected):
        assert _evaluate(rule, {"age": 30}) is expected

    def test_float_field(self):
        assert _evaluate("score > 3.5", {"score": 3.75}) is True

    def test_string_equality(self):
        assert _evaluate("department = 'Sales'", {"department": "Sales"}) is True
        assert _evaluate("department = 'Sales'", {"department": "Marketing"}) is False

    def test_string_ordering(self):
        assert _evaluate("name < 'm'", {"name": "alice"}) is True

    def test_boolean_equality(self):
        assert _evaluate("active == true", {"active": True}) is True
        assert _evaluate("active == false", {"active": True}) is False

    def test_field_to_field(self):
        assert _evaluate("salary > bonus", {"salary": 100, "bonus": 10}) is True


class TestLogical:
    """Logical operators."""

    def test_and_rule(self):
        rule = "age > 30 AND department = 'Sales'"
        assert _evaluate(rule, {"age": 35, "department": "Sales"}) is True
        assert _evaluate(rule, {"age": 35, "department": "Marketing"}) is False

    def test_or_rule(self):
        rule = "age > 30 OR department = 'Sales'"
        assert _evaluate(rule, {"age": 20, "department": "Sales"}) is True
        assert _evaluate(rule, {"age": 20, "department": "Marketing"}) is False

    def test_nested_rule(self):
        rule = (
            "((age > 30 AND department = 'Marketing')) "
            "AND (salary > 20000 OR experience > 5)"
        )
        data = {"age": 32, "department": "Marketing", "salary": 10000, "experience": 6}
        assert _evaluate(rule, data) is True
        assert _evaluate(rule, {**data, "experience": 2}) is False

    def test_not(self):
        assert _evaluate("!(age > 30)", {"age": 20}) is True

    def test_negation(self):
        assert _evaluate("balance > -100", {"balance": -50}) is True

    def test_logical_operands_are_coerced_to_bool(self):
        assert _evaluate("name && active", {"name": "x", "active": 1}) is True
        assert _evaluate("name || active", {"name": "", "active": 0}) is False


class TestStrictEquality:
    """Equality never coerces across types."""

    def test_number_vs_string_field(self):
        assert _evaluate("age == 30", {"age": "30"}) is False

    def test_bool_vs_number(self):
        assert _evaluate("flag == 1", {"flag": True}) is False

    def test_int_vs_float(self):
        assert strict_equals(30, 30.0) is True

    def test_not_equal_across_types(self):
        assert _evaluate("age != 30", {"age": "30"}) is True

    def test_quoted_true_is_a_string(self):
        assert _evaluate("status = 'true'", {"status": "true"}) is True
        assert _evaluate("status = 'true'", {"status": True}) is False

    def test_bare_true_is_a_boolean(self):
        assert _evaluate("status = true", {"status": True}) is True
        assert _evaluate("status = true", {"status": "true"}) is False

    def test_padded_numeric_text_is_a_string(self):
        assert _evaluate("code = ' 5 '", {"code": " 5 "}) is True
        assert _evaluate("code = ' 5 '", {"code": 5}) is False


class TestEvaluationErrors:
    """Evaluation failures."""

    def test_missing_field(self):
        with pytest.raises(MissingFieldError, match="salary") as exc_info:
            _evaluate("salary > 100", {"age": 3})
        assert exc_info.value.field == "salary"

    def test_incomparable_operands(self):
        with pytest.raises(IncomparableOperandsError, match="str > float"):
            _evaluate("name > 3", {"name": "bob"})

    def test_bool_is_not_ordered(self):
        with pytest.raises(IncomparableOperandsError):
            _evaluate("active > 0", {"active": True})

    def test_negating_string(self):
        with pytest.raises(EvaluationError, match="Cannot negate"):
            _evaluate("-name == 1", {"name": "x"})

    def test_unsupported_binary_operator(self):
        tree = RuleNode.operator("+", RuleNode.literal("1"), RuleNode.literal("2"))
        with pytest.raises(UnsupportedOperatorError, match="Unsupported operator: \\+"):
            evaluate_rule(tree, {})

    def test_unsupported_unary_operator(self):
        tree = RuleNode.operator("~", RuleNode.literal("1"))
        with pytest.raises(UnsupportedOperatorError):
            evaluate_rule(tree, {})

    def test_unsupported_node_kind(self):
        with pytest.raises(UnsupportedNodeError, match="Unsupported AST node type"):
            evaluate_rule({"kind": "function", "value": "f"}, {})

    def test_operator_without_operand(self):
        node = RuleNode(kind=NodeKind.OPERATOR, value="&&")
        with pytest.raises(EvaluationError, match="has no operand"):
            Evaluator({}).evaluate(node)


class TestSerializedTrees:
    """Evaluating trees given in their stored form."""

    def test_evaluate_mapping(self):
        tree = parse_rule("age > 30 AND department = 'Sales'").to_dict()
        assert evaluate_rule(tree, {"age": 35, "department": "Sales"}) is True

    def test_untagged_tree(self):
        tree = {
            "type": "operator",
            "value": ">",
            "left": {"type": "operand", "value": "salary"},
            "right": {"type": "operand", "value": "50000"},
        }
        assert evaluate_rule(tree, {"salary": 60000}) is True

    def test_evaluation_is_deterministic(self):
        tree = parse_rule("age > 30 OR salary > 50000")
        data = {"age": 25, "salary": 60000}
        assert [evaluate_rule(tree, data) for _ in range(3)] == [True, True, True]

    def test_literal_only_tree(self):
        assert evaluate_rule(RuleNode.literal("42"), {}) == 42.0
