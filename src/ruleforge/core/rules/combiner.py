"""Folds several rules into one tree using the most frequent operator."""

from collections import Counter
from functools import reduce
from typing import Callable, Iterable, Sequence

from .exceptions import EmptyRuleSetError
from .tree import RuleNode

DEFAULT_COMBINE_OPERATOR = "&&"


def tally_operators(trees: Iterable[RuleNode]) -> list[tuple[str, int, int]]:
    """Count binary operator symbols across ``trees`` in pre-order traversal.

    Returns:
        ``(symbol, count, first_seen_index)`` tuples in first-seen order.
    """
    counts: Counter[str] = Counter()
    first_seen: dict[str, int] = {}

    def visit(node: RuleNode | None) -> None:
        if node is None or not node.is_operator:
            return
        # Unary operators cannot join two trees
        if not node.is_unary:
            first_seen.setdefault(node.value, len(first_seen))
            counts[node.value] += 1
        visit(node.left)
        visit(node.right)

    for tree in trees:
        visit(tree)

    return [(symbol, counts[symbol], index) for symbol, index in first_seen.items()]


def most_frequent_operator(trees: Sequence[RuleNode]) -> str:
    """Pick the most frequent operator; ties go to the one seen first."""
    tally = tally_operators(trees)
    if not tally:
        return DEFAULT_COMBINE_OPERATOR
    symbol, _, _ = max(tally, key=lambda entry: (entry[1], -entry[2]))
    return symbol


def combine_trees(trees: Sequence[RuleNode]) -> RuleNode:
    """Left-fold ``trees`` under the most frequent operator."""
    if not trees:
        raise EmptyRuleSetError()
    if len(trees) == 1:
        return trees[0]

    operator = most_frequent_operator(trees)
    return reduce(lambda acc, tree: RuleNode.operator(operator, acc, tree), trees[1:], trees[0])


def combine_rules(rule_strings: Sequence[str], parse: Callable[[str], RuleNode]) -> RuleNode:
    """Parse every rule string and combine the resulting trees.

    Args:
        rule_strings: Rules in combination order.
        parse: Full text-to-tree pipeline applied to each rule.

    Raises:
        EmptyRuleSetError: If ``rule_strings`` is empty.
        ParseError: From the first rule that fails to parse.
    """
    if not rule_strings:
        raise EmptyRuleSetError()
    return combine_trees([parse(rule) for rule in rule_strings])
