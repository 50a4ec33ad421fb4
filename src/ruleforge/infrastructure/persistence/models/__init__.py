"""SQLAlchemy models for RuleForge tables.

All models inherit from the Base class defined in database.py and are
automatically created on application startup in development mode.
"""

from ruleforge.infrastructure.persistence.models.rule import RuleModel

__all__ = [
    "RuleModel",
]
