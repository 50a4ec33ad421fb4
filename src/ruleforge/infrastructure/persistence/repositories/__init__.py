"""Persistence repositories for database operations."""

from ruleforge.infrastructure.persistence.repositories.rule_repository import (
    RuleRepository,
)

__all__ = [
    "RuleRepository",
]
