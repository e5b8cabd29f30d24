"""Likes, mutual matches and candidate browsing."""
from __future__ import annotations

import logging
from typing import List

from . import profiles
from .context import AppContext
from .schemas import Profile, UserType

logger = logging.getLogger(__name__)


def likes_key(email: str) -> str:
    return f"likes_{email}"


def matches_key(email: str) -> str:
    return f"matches_{email}"


def _string_list(ctx: AppContext, key: str) -> List[str]:
    raw = ctx.store.get(key, [])
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


def _append_unique(ctx: AppContext, key: str, value: str) -> List[str]:
    items = _string_list(ctx, key)
    if value not in items:
        items.append(value)
        ctx.store.set(key, items)
    return items


def likes(ctx: AppContext, email: str) -> List[str]:
    return _string_list(ctx, likes_key(email))


def matches(ctx: AppContext, email: str) -> List[str]:
    return _string_list(ctx, matches_key(email))


def like(ctx: AppContext, email: str, other_email: str) -> bool:
    """Record that ``email`` liked ``other_email``; True when the like is mutual."""
    if not email or not other_email or email == other_email:
        return False
    _append_unique(ctx, likes_key(email), other_email)
    if email not in likes(ctx, other_email):
        return False
    _append_unique(ctx, matches_key(email), other_email)
    _append_unique(ctx, matches_key(other_email), email)
    logger.info("New match between %s and %s", email, other_email)
    return True


def unmatch(ctx: AppContext, email: str, other_email: str) -> None:
    for owner, other in ((email, other_email), (other_email, email)):
        remaining = [item for item in matches(ctx, owner) if item != other]
        ctx.store.set(matches_key(owner), remaining)


def candidates(ctx: AppContext, email: str, user_type: UserType) -> List[Profile]:
    """Profiles of the opposite user type not yet liked or matched."""
    seen = set(likes(ctx, email)) | set(matches(ctx, email))
    return [
        profile
        for profile in profiles.list_profiles(ctx, user_type.opposite)
        if profile.email and profile.email != email and profile.email not in seen
    ]
