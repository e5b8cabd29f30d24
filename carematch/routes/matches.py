from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from .. import matching
from ..context import AppContext
from ..deps import get_context, resolve_email, resolve_user_type
from ..schemas import Profile, UserType

router = APIRouter(prefix="/api/v1", tags=["matches"])


class LikePayload(BaseModel):
    email: str
    liker: Optional[str] = None


@router.post("/matches/like")
async def like_endpoint(payload: LikePayload, ctx: AppContext = Depends(get_context)) -> dict:
    me = resolve_email(ctx, payload.liker)
    if payload.email == me:
        raise HTTPException(status_code=400, detail="Cannot like your own profile.")
    return {"matched": matching.like(ctx, me, payload.email)}


@router.get("/matches", response_model=List[str])
async def list_matches_endpoint(
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[str]:
    return matching.matches(ctx, resolve_email(ctx, email))


@router.get("/matches/candidates", response_model=List[Profile])
async def candidates_endpoint(
    email: Optional[str] = Query(None),
    user_type: Optional[UserType] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[Profile]:
    return matching.candidates(ctx, resolve_email(ctx, email), resolve_user_type(ctx, user_type))
