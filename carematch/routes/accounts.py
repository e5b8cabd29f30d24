from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .. import accounts
from ..context import AppContext
from ..deps import get_context
from ..errors import AuthError, ValidationError
from ..schemas import Session, UserType

router = APIRouter(prefix="/api/v1", tags=["accounts"])
logger = logging.getLogger(__name__)


class RegisterPayload(BaseModel):
    user_type: UserType = Field(..., alias="userType")
    username: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = Field(default="", alias="confirmPassword")

    model_config = ConfigDict(populate_by_name=True)


class AccountOut(BaseModel):
    username: str
    email: str
    user_type: UserType


class LoginPayload(BaseModel):
    user_type: UserType = Field(..., alias="userType")
    email: str = ""
    password: str = ""

    model_config = ConfigDict(populate_by_name=True)


@router.post("/accounts/register", response_model=AccountOut)
async def register_endpoint(payload: RegisterPayload, ctx: AppContext = Depends(get_context)) -> AccountOut:
    try:
        account = accounts.register(
            ctx,
            payload.user_type,
            payload.username,
            payload.email,
            payload.password,
            payload.confirm_password,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return AccountOut(username=account.username, email=account.email, user_type=account.user_type)


@router.post("/session/login", response_model=Session)
async def login_endpoint(payload: LoginPayload, ctx: AppContext = Depends(get_context)) -> Session:
    try:
        return accounts.login(ctx, payload.user_type, payload.email, payload.password)
    except AuthError as exc:
        raise HTTPException(status_code=401, detail=exc.message) from exc


@router.post("/session/logout", response_model=Session)
async def logout_endpoint(ctx: AppContext = Depends(get_context)) -> Session:
    accounts.logout(ctx)
    return accounts.current_session(ctx)


@router.get("/session", response_model=Session)
async def session_endpoint(ctx: AppContext = Depends(get_context)) -> Session:
    return accounts.current_session(ctx)
