"""API router for creating, listing and evaluating stored rules."""

from typing import List

from fastapi import APIRouter, Query, status

from ruleforge.core.logging import get_logger
from ruleforge.core.rules import ParseError, RuleError
from ruleforge.domain.services import RuleNotFoundError, RuleTooLongError
from ruleforge.infrastructure.api.dependencies import RuleServiceDep, raise_http_error
from ruleforge.infrastructure.api.schemas import (
    EvaluateResponse,
    EvaluateStoredRequest,
    RuleCreate,
    RuleResponse,
)

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "",
    response_model=RuleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_rule(rule_in: RuleCreate, service: RuleServiceDep):
    """Parse a rule string and store it with its tree.

    Invalid rules are rejected and nothing is stored.
    """
    try:
        rule = await service.create_rule(rule_in.rule_string)
    except ParseError as exc:
        logger.warning(
            "Rule creation failed: invalid rule string",
            error=exc.message,
            position=exc.position,
        )
        raise_http_error(exc)
    except (RuleError, RuleTooLongError) as exc:
        logger.warning("Rule creation failed", error=str(exc))
        raise_http_error(exc)

    return RuleResponse.from_entity(rule)


@router.get("", response_model=List[RuleResponse])
async def list_rules(
    service: RuleServiceDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """List stored rules, oldest first."""
    rules = await service.list_rules(skip=skip, limit=limit)
    return [RuleResponse.from_entity(rule) for rule in rules]


@router.get("/{rule_id}", response_model=RuleResponse)
async def get_rule(rule_id: str, service: RuleServiceDep):
    """Get a stored rule by ID."""
    try:
        rule = await service.get_rule(rule_id)
    except RuleNotFoundError as exc:
        raise_http_error(exc)
    return RuleResponse.from_entity(rule)


@router.post("/{rule_id}/evaluate", response_model=EvaluateResponse)
async def evaluate_stored_rule(
    rule_id: str,
    request: EvaluateStoredRequest,
    service: RuleServiceDep,
):
    """Evaluate a stored rule against a data record."""
    try:
        result = await service.evaluate_stored_rule(rule_id, request.data)
    except RuleNotFoundError as exc:
        raise_http_error(exc)
    except RuleError as exc:
        logger.warning("Rule evaluation failed", rule_id=rule_id, error=str(exc))
        raise_http_error(exc)

    return EvaluateResponse(result=result)
