"""FastAPI dependencies and error translation for the rules API."""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ruleforge.core.config import get_settings
from ruleforge.core.rules import (
    EmptyRuleSetError,
    ParseError,
    RuleError,
)
from ruleforge.domain.services import RuleNotFoundError, RuleService, RuleTooLongError
from ruleforge.infrastructure.api.schemas import ParseErrorDetail
from ruleforge.infrastructure.persistence.database import get_db_session


async def get_rule_service(
    session: AsyncSession = Depends(get_db_session),
) -> RuleService:
    """Provide a rule service bound to the request's database session."""
    return RuleService(session, get_settings())


RuleServiceDep = Annotated[RuleService, Depends(get_rule_service)]


def raise_http_error(exc: Exception) -> NoReturn:
    """Translate a rule or domain error into an HTTPException.

    Args:
        exc: The error raised by the service or engine.

    Raises:
        HTTPException: Always; unknown errors are re-raised unchanged.
    """
    if isinstance(exc, ParseError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ParseErrorDetail(
                message=exc.message, position=exc.position, fragment=exc.fragment
            ).model_dump(),
        ) from exc
    if isinstance(exc, EmptyRuleSetError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, RuleNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, (RuleTooLongError, RuleError)):
        # Unsupported constructs and evaluation failures
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)
        ) from exc
    raise exc
