"""API Routes for RuleForge."""

from .engine_router import router as engine_router
from .rules_router import router as rules_router

__all__ = [
    "engine_router",
    "rules_router",
]
