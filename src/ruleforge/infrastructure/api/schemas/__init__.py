"""API schemas for request/response validation."""

from ruleforge.infrastructure.api.schemas.rule_schemas import (
    CombineRequest,
    EvaluateRequest,
    EvaluateResponse,
    EvaluateStoredRequest,
    ParseErrorDetail,
    RuleCreate,
    RuleNodeSchema,
    RuleResponse,
)

__all__ = [
    "CombineRequest",
    "EvaluateRequest",
    "EvaluateResponse",
    "EvaluateStoredRequest",
    "ParseErrorDetail",
    "RuleCreate",
    "RuleNodeSchema",
    "RuleResponse",
]
