"""Profile storage: public profiles, per-type extras and children."""
from __future__ import annotations

import logging
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .context import AppContext
from .schemas import ChildProfile, NannyExtras, ParentExtras, Profile, UserType

logger = logging.getLogger(__name__)

Extras = Union[NannyExtras, ParentExtras]


def profile_key(user_type: UserType, email: Optional[str] = None) -> str:
    if email:
        return f"{user_type.value}_profile_{email}"
    return f"{user_type.value}_profile"


def _decode_profile(raw) -> Optional[Profile]:
    if not isinstance(raw, dict):
        return None
    try:
        return Profile.model_validate(raw)
    except PydanticValidationError:
        return None


def save(ctx: AppContext, user_type: UserType, email: Optional[str], profile: Profile) -> None:
    key = profile_key(user_type, email)
    ctx.store.set(key, profile.model_dump(mode="json"))
    if email:
        ctx.store.index_profile(user_type.value, email, key)
    logger.info("Saved %s profile under %s", user_type.value, key)


def load(ctx: AppContext, user_type: UserType, email: Optional[str] = None) -> Optional[Profile]:
    return _decode_profile(ctx.store.get(profile_key(user_type, email)))


def find_by_email_suffix(ctx: AppContext, email: str) -> Optional[Profile]:
    """Locate a profile when the caller does not know its user type.

    The profile index answers directly. Rows written before the index existed
    are found by scanning profile keys in sorted order, so the first match is
    stable across calls.
    """
    if not email:
        return None
    key = ctx.store.lookup_profile_key(email)
    if key is not None:
        profile = _decode_profile(ctx.store.get(key))
        if profile is not None:
            return profile

    for candidate in ctx.store.keys():
        if "_profile" not in candidate or not candidate.endswith(email):
            continue
        profile = _decode_profile(ctx.store.get(candidate))
        if profile is not None:
            return profile
    return None


def add_image(ctx: AppContext, user_type: UserType, email: Optional[str], data: bytes) -> Profile:
    profile = load(ctx, user_type, email)
    if profile is None:
        raise ValueError("Profile not found")
    ref = ctx.images.save(data)
    if ref is None:
        raise ValueError("Image could not be saved.")
    profile = profile.model_copy(update={"image_refs": [*profile.image_refs, ref]})
    save(ctx, user_type, email, profile)
    return profile


def is_complete(profile: Optional[Profile]) -> bool:
    if profile is None:
        return False
    return bool(profile.name) and profile.age > 0 and bool(profile.image_refs)


def list_profiles(ctx: AppContext, user_type: Optional[UserType] = None) -> List[Profile]:
    types = [user_type] if user_type is not None else list(UserType)
    profiles: List[Profile] = []
    for kind in types:
        prefix = f"{kind.value}_profile_"
        for key in ctx.store.keys(prefix):
            profile = _decode_profile(ctx.store.get(key))
            if profile is not None:
                profiles.append(profile)
    return profiles


def extras_key(user_type: UserType, email: str) -> str:
    return f"{user_type.value}Extras_{email}"


def save_extras(ctx: AppContext, user_type: UserType, email: str, extras: Extras) -> None:
    expected = NannyExtras if user_type is UserType.NANNY else ParentExtras
    if not isinstance(extras, expected):
        raise TypeError(f"{user_type.value} extras must be {expected.__name__}")
    ctx.store.set(extras_key(user_type, email), extras.model_dump(mode="json"))


def load_extras(ctx: AppContext, user_type: UserType, email: str) -> Optional[Extras]:
    raw = ctx.store.get(extras_key(user_type, email))
    if not isinstance(raw, dict):
        return None
    model = NannyExtras if user_type is UserType.NANNY else ParentExtras
    try:
        return model.model_validate(raw)
    except PydanticValidationError:
        return None


def children_key(email: str) -> str:
    return f"children_{email}"


def load_children(ctx: AppContext, email: str) -> List[ChildProfile]:
    if not email:
        return []
    raw = ctx.store.get(children_key(email), [])
    if not isinstance(raw, list):
        return []
    try:
        return [ChildProfile.model_validate(item) for item in raw]
    except PydanticValidationError:
        return []


def save_children(ctx: AppContext, email: str, children: List[ChildProfile]) -> None:
    if not email:
        return
    ctx.store.set(children_key(email), [child.model_dump(mode="json") for child in children])


def add_child(ctx: AppContext, email: str, child: ChildProfile) -> List[ChildProfile]:
    children = load_children(ctx, email)
    children.append(child)
    save_children(ctx, email, children)
    return children


def remove_child(ctx: AppContext, email: str, child_id: str) -> List[ChildProfile]:
    children = [child for child in load_children(ctx, email) if child.id != child_id]
    save_children(ctx, email, children)
    return children
