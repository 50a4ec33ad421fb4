"""Rule service for business logic.

Wraps the rule engine with persistence: rules are parsed before anything is
written, combined rules are stored like any other rule, and stored rules can
be evaluated by ID.
"""

from typing import Any, Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ruleforge.core.config import Settings, get_settings
from ruleforge.core.logging import get_logger
from ruleforge.core.rules import RuleNode, combine_rules, evaluate_rule, parse_rule
from ruleforge.domain.entities.rule import Rule
from ruleforge.infrastructure.persistence.repositories import RuleRepository

logger = get_logger(__name__)


class RuleNotFoundError(Exception):
    """Raised when a rule ID does not exist."""

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule '{rule_id}' not found")


class RuleTooLongError(Exception):
    """Raised when a rule string exceeds the configured maximum length."""

    def __init__(self, length: int, max_length: int) -> None:
        self.length = length
        self.max_length = max_length
        super().__init__(f"Rule string is {length} characters long, maximum is {max_length}")


def combined_rule_string(rule_strings: Sequence[str]) -> str:
    """Label stored for the result of a combination."""
    return f"Combined Rule({', '.join(rule_strings)})"


class RuleService:
    """Service for rule business logic."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            settings: Optional settings; defaults to the cached application settings.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.repository = RuleRepository(session)

    def parse(self, rule_string: str) -> RuleNode:
        """Parse a rule string within the configured limits.

        Raises:
            RuleTooLongError: If the rule string is longer than ``max_rule_length``.
            ParseError: If the rule string is not a valid expression.
            UnsupportedExpressionError: If it uses a construct with no tree form.
        """
        if len(rule_string) > self.settings.max_rule_length:
            raise RuleTooLongError(len(rule_string), self.settings.max_rule_length)
        return parse_rule(rule_string, max_depth=self.settings.max_rule_depth)

    async def create_rule(self, rule_string: str) -> Rule:
        """Parse and store a rule.

        Nothing is written when parsing fails.
        """
        ast = self.parse(rule_string)
        rule = await self.repository.create(rule_string, ast)
        await self.session.commit()

        logger.info("Rule created", rule_id=rule.id, depth=ast.depth())
        return rule

    async def get_rule(self, rule_id: str) -> Rule:
        """Get a stored rule.

        Raises:
            RuleNotFoundError: If no rule has this ID.
        """
        rule = await self.repository.get_by_id(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    async def list_rules(self, skip: int = 0, limit: int = 100) -> list[Rule]:
        """List stored rules."""
        return await self.repository.list_all(skip=skip, limit=limit)

    async def combine_rules(self, rule_strings: Sequence[str]) -> Rule:
        """Combine rule strings into one tree and store the result.

        Raises:
            EmptyRuleSetError: If ``rule_strings`` is empty.
            ParseError: From the first rule that fails to parse; nothing is stored.
        """
        for rule_string in rule_strings:
            if len(rule_string) > self.settings.max_rule_length:
                raise RuleTooLongError(len(rule_string), self.settings.max_rule_length)

        ast = combine_rules(rule_strings, max_depth=self.settings.max_rule_depth)
        rule = await self.repository.create(combined_rule_string(rule_strings), ast)
        await self.session.commit()

        logger.info(
            "Rules combined",
            rule_id=rule.id,
            rule_count=len(rule_strings),
            operator=ast.value if ast.is_operator else None,
        )
        return rule

    def evaluate_tree(self, ast: RuleNode | Mapping[str, Any], data: Mapping[str, Any]) -> Any:
        """Evaluate a tree supplied by the caller against ``data``."""
        result = evaluate_rule(ast, data)
        logger.debug("Rule evaluated", result=result, fields=sorted(data))
        return result

    async def evaluate_stored_rule(self, rule_id: str, data: Mapping[str, Any]) -> Any:
        """Evaluate a stored rule against ``data``.

        Raises:
            RuleNotFoundError: If no rule has this ID.
            EvaluationError: If evaluation fails.
        """
        rule = await self.get_rule(rule_id)
        result = evaluate_rule(rule.ast, data)
        logger.debug("Stored rule evaluated", rule_id=rule_id, result=result)
        return result
