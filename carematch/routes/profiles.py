from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from .. import profiles
from ..context import AppContext
from ..deps import get_context, resolve_email
from ..schemas import ChildProfile, NannyExtras, ParentExtras, Profile, UserType

router = APIRouter(prefix="/api/v1", tags=["profiles"])


class ProfilePayload(BaseModel):
    name: str
    age: int = Field(default=0, ge=0)
    description: str = ""
    image_refs: List[str] = Field(default_factory=list)


class ProfileOut(BaseModel):
    profile: Profile
    is_complete: bool


@router.put("/profiles/{user_type}", response_model=ProfileOut)
async def save_profile_endpoint(
    user_type: UserType,
    payload: ProfilePayload,
    email: Optional[str] = Query(None, description="Account email; omit for the single-device profile"),
    ctx: AppContext = Depends(get_context),
) -> ProfileOut:
    existing = profiles.load(ctx, user_type, email)
    profile = Profile(
        **({"id": existing.id} if existing else {}),
        user_type=user_type,
        email=email,
        name=payload.name.strip(),
        age=payload.age,
        description=payload.description.strip(),
        image_refs=payload.image_refs,
    )
    profiles.save(ctx, user_type, email, profile)
    return ProfileOut(profile=profile, is_complete=profiles.is_complete(profile))


@router.get("/profiles/lookup", response_model=ProfileOut)
async def lookup_profile_endpoint(
    email: str = Query(..., description="Account email"),
    ctx: AppContext = Depends(get_context),
) -> ProfileOut:
    profile = profiles.find_by_email_suffix(ctx, email)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileOut(profile=profile, is_complete=profiles.is_complete(profile))


@router.get("/profiles/{user_type}", response_model=ProfileOut)
async def get_profile_endpoint(
    user_type: UserType,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> ProfileOut:
    profile = profiles.load(ctx, user_type, email)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileOut(profile=profile, is_complete=profiles.is_complete(profile))


@router.post("/profiles/{user_type}/images", response_model=ProfileOut)
async def upload_image_endpoint(
    user_type: UserType,
    request: Request,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> ProfileOut:
    """Store the raw request body as a photo and attach it to the profile."""

    try:
        profile = profiles.add_image(ctx, user_type, email, await request.body())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ProfileOut(profile=profile, is_complete=profiles.is_complete(profile))


@router.put("/profiles/nanny/extras", response_model=NannyExtras)
async def save_nanny_extras_endpoint(
    payload: NannyExtras,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> NannyExtras:
    profiles.save_extras(ctx, UserType.NANNY, resolve_email(ctx, email), payload)
    return payload


@router.put("/profiles/parent/extras", response_model=ParentExtras)
async def save_parent_extras_endpoint(
    payload: ParentExtras,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> ParentExtras:
    profiles.save_extras(ctx, UserType.PARENT, resolve_email(ctx, email), payload)
    return payload


@router.get("/children", response_model=List[ChildProfile])
async def list_children_endpoint(
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[ChildProfile]:
    return profiles.load_children(ctx, resolve_email(ctx, email))


@router.post("/children", response_model=List[ChildProfile])
async def add_child_endpoint(
    payload: ChildProfile,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[ChildProfile]:
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="name is required")
    return profiles.add_child(ctx, resolve_email(ctx, email), payload)


@router.delete("/children/{child_id}", response_model=List[ChildProfile])
async def remove_child_endpoint(
    child_id: str,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[ChildProfile]:
    return profiles.remove_child(ctx, resolve_email(ctx, email), child_id)
