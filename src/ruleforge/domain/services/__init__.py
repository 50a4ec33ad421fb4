"""Domain services for RuleForge."""

from ruleforge.domain.services.rule_service import (
    RuleNotFoundError,
    RuleService,
    RuleTooLongError,
    combined_rule_string,
)

__all__ = [
    "RuleNotFoundError",
    "RuleService",
    "RuleTooLongError",
    "combined_rule_string",
]
