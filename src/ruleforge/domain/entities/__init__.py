"""Domain entities for RuleForge.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from ruleforge.domain.entities.rule import Rule

__all__ = [
    "Rule",
]
