"""Pydantic schemas for the rules API."""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from ruleforge.domain.entities.rule import Rule

# bool must be matched before int so true/false stay booleans.
FieldValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


class RuleNodeSchema(BaseModel):
    """Canonical tree node as exchanged over the wire.

    ``kind`` is left as a plain string so that unknown kinds reach the engine
    and fail as an unsupported node instead of a schema error. Older clients
    send it as ``type``.
    """

    kind: str = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        description="'operator' or 'operand'",
    )
    value: str = Field(..., description="Operator symbol or operand text")
    left: Optional["RuleNodeSchema"] = None
    right: Optional["RuleNodeSchema"] = None
    operand_type: Optional[str] = Field(
        None, description="'literal', 'boolean' or 'identifier' for operands"
    )

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> Any:
        """Accept numeric and boolean operand values and store them as text."""
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


class RuleCreate(BaseModel):
    """Schema for creating a rule."""

    rule_string: str = Field(..., min_length=1, description="Rule expression, e.g. \"age > 30 AND department = 'Sales'\"")


class RuleResponse(BaseModel):
    """Schema for a stored rule."""

    id: str
    rule_string: str
    ast: RuleNodeSchema
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, rule: Rule) -> "RuleResponse":
        """Build the response from a rule entity."""
        return cls(
            id=rule.id,
            rule_string=rule.rule_string,
            ast=RuleNodeSchema.model_validate(rule.ast.to_dict()),
            created_at=rule.created_at,
        )


class CombineRequest(BaseModel):
    """Schema for combining rules."""

    rule_strings: list[str] = Field(..., description="Rules to combine, in order")


class EvaluateRequest(BaseModel):
    """Schema for evaluating a caller-supplied tree."""

    ast: RuleNodeSchema
    data: dict[str, FieldValue] = Field(default_factory=dict)


class EvaluateStoredRequest(BaseModel):
    """Schema for evaluating a stored rule."""

    data: dict[str, FieldValue] = Field(default_factory=dict)


class EvaluateResponse(BaseModel):
    """Schema for an evaluation result."""

    result: FieldValue


class ParseErrorDetail(BaseModel):
    """Detail body returned for rule strings that fail to parse."""

    message: str
    position: Optional[int] = None
    fragment: Optional[str] = None
