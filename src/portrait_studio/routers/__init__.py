"""API routers module."""

from .accounts import router as accounts_router
from .prompts import router as prompts_router
from .workspaces import router as workspaces_router

__all__ = ["accounts_router", "prompts_router", "workspaces_router"]
