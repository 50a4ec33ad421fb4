"""API router for combining rules and evaluating caller-supplied trees."""

from fastapi import APIRouter

from ruleforge.core.logging import get_logger
from ruleforge.core.rules import RuleError
from ruleforge.domain.services import RuleTooLongError
from ruleforge.infrastructure.api.dependencies import RuleServiceDep, raise_http_error
from ruleforge.infrastructure.api.schemas import (
    CombineRequest,
    EvaluateRequest,
    EvaluateResponse,
    RuleResponse,
)

router = APIRouter()
logger = get_logger(__name__)


@router.post("/combine", response_model=RuleResponse)
async def combine_rules(request: CombineRequest, service: RuleServiceDep):
    """Combine rule strings into a single tree and store it.

    The tree is folded under the most frequent operator across all rules.
    If any rule fails to parse nothing is stored.
    """
    try:
        rule = await service.combine_rules(request.rule_strings)
    except (RuleError, RuleTooLongError) as exc:
        logger.warning(
            "Rule combination failed",
            rule_count=len(request.rule_strings),
            error=str(exc),
        )
        raise_http_error(exc)

    return RuleResponse.from_entity(rule)


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_rule(request: EvaluateRequest, service: RuleServiceDep):
    """Evaluate a tree against a data record."""
    try:
        result = service.evaluate_tree(request.ast.model_dump(), request.data)
    except RuleError as exc:
        logger.warning("Rule evaluation failed", error=str(exc))
        raise_http_error(exc)

    return EvaluateResponse(result=result)
