from __future__ import annotations

from carematch import accounts, profiles
from carematch.context import AppContext
from carematch.schemas import Profile, UserType


def write_raw(ctx: AppContext, key: str, value: str) -> None:
    with ctx.store.get_connection() as conn:
        conn.execute(
            "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
            (key, value, "2024-01-01T00:00:00"),
        )
        conn.commit()


def seed_parent(ctx: AppContext, email: str = "alice@x.com", password: str = "secret") -> None:
    accounts.register(ctx, UserType.PARENT, "Alice", email, password, password)


def seed_complete_profile(ctx: AppContext, user_type: UserType, email: str, name: str = "Alice") -> Profile:
    profile = Profile(
        user_type=user_type,
        email=email,
        name=name,
        age=34,
        description="Loves the park",
        image_refs=["photo.jpg"],
    )
    profiles.save(ctx, user_type, email, profile)
    return profile
