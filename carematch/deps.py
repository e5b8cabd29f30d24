"""FastAPI dependencies shared by the routers."""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request

from .context import AppContext
from .schemas import UserType


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def resolve_email(ctx: AppContext, email: Optional[str]) -> str:
    """Explicit email wins; otherwise fall back to the logged-in account."""
    resolved = email or ctx.session.logged_in_email
    if not resolved:
        raise HTTPException(status_code=400, detail="email is required when no account is logged in.")
    return resolved


def resolve_user_type(ctx: AppContext, user_type: Optional[UserType]) -> UserType:
    resolved = user_type or ctx.session.user_type
    if resolved is None:
        raise HTTPException(status_code=400, detail="user_type is required when no account is logged in.")
    return resolved
