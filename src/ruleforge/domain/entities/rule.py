"""Rule entity.

A rule pairs the text a caller submitted with the canonical tree parsed from
it. Rules are created once and never modified.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ruleforge.core.rules import RuleNode


@dataclass(frozen=True)
class Rule:
    """Stored rule entity.

    Attributes:
        id: Unique identifier (UUID string).
        rule_string: The rule as submitted, or ``Combined Rule(...)`` for combinations.
        ast: Canonical tree of the rule.
        created_at: Timestamp when the rule was stored.
    """

    id: str
    rule_string: str
    ast: RuleNode
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate rule after initialization."""
        if not self.id:
            raise ValueError("Rule ID is required")
        if not self.rule_string or not self.rule_string.strip():
            raise ValueError("Rule string is required")
