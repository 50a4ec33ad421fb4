"""RuleForge - business rules as boolean expressions.

Parse human-readable rules into evaluable trees, combine several rules into
one decision tree, and evaluate rules against data records.
"""

__version__ = "0.1.0"

from ruleforge.infrastructure.api.app import app

__all__ = ["app", "__version__"]
