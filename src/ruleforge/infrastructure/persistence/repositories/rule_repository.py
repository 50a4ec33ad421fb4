"""Repository for rule operations.

Provides create and read operations for the rules table. Trees are stored as
JSON text in their canonical serialized shape.
"""

import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ruleforge.core.rules import RuleNode
from ruleforge.domain.entities.rule import Rule
from ruleforge.infrastructure.persistence.models import RuleModel


class RuleRepository:
    """Repository for rule database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, rule_string: str, ast: RuleNode) -> Rule:
        """Store a new rule.

        Args:
            rule_string: The rule as submitted.
            ast: Its canonical tree.

        Returns:
            The stored rule entity.
        """
        model = RuleModel(
            id=str(uuid.uuid4()),
            rule_string=rule_string,
            ast=json.dumps(ast.to_dict()),
            created_at=datetime.now(timezone.utc),
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def get_by_id(self, rule_id: str) -> Rule | None:
        """Get a rule by ID.

        Args:
            rule_id: The rule ID.

        Returns:
            The rule entity if found, None otherwise.
        """
        result = await self.session.execute(
            select(RuleModel).where(RuleModel.id == rule_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model is not None else None

    async def list_all(self, skip: int = 0, limit: int = 100) -> list[Rule]:
        """List rules, oldest first.

        Args:
            skip: Number of rules to skip.
            limit: Maximum number of rules to return.
        """
        result = await self.session.execute(
            select(RuleModel)
            .order_by(RuleModel.created_at, RuleModel.id)
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def count(self) -> int:
        """Count stored rules."""
        result = await self.session.execute(select(func.count()).select_from(RuleModel))
        return result.scalar_one()

    @staticmethod
    def _to_entity(model: RuleModel) -> Rule:
        return Rule(
            id=model.id,
            rule_string=model.rule_string,
            ast=RuleNode.from_dict(json.loads(model.ast)),
            created_at=model.created_at,
        )
