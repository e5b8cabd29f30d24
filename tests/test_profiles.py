from __future__ import annotations

import pytest

from carematch import profiles
from carematch.schemas import ChildGender, ChildProfile, NannyExtras, ParentExtras, Profile, UserType

from .helpers import write_raw


def make_profile(**overrides) -> Profile:
    fields = {
        "user_type": UserType.NANNY,
        "email": "nina@x.com",
        "name": "Nina",
        "age": 27,
        "description": "Five years with toddlers",
        "image_refs": ["a.jpg"],
    }
    fields.update(overrides)
    return Profile(**fields)


def test_save_and_load_by_email(context) -> None:
    profile = make_profile()
    profiles.save(context, UserType.NANNY, "nina@x.com", profile)

    assert context.store.contains("nanny_profile_nina@x.com")
    assert profiles.load(context, UserType.NANNY, "nina@x.com") == profile
    assert profiles.load(context, UserType.PARENT, "nina@x.com") is None
    assert profiles.load(context, UserType.NANNY, None) is None


def test_single_device_key_scheme(context) -> None:
    profile = make_profile(email=None)
    profiles.save(context, UserType.NANNY, None, profile)

    assert context.store.contains("nanny_profile")
    assert profiles.load(context, UserType.NANNY) == profile


def test_undecodable_profile_is_none(context) -> None:
    write_raw(context, "parent_profile_bad@x.com", "{oops")
    assert profiles.load(context, UserType.PARENT, "bad@x.com") is None

    write_raw(context, "parent_profile_worse@x.com", '{"name": "No type"}')
    assert profiles.load(context, UserType.PARENT, "worse@x.com") is None


def test_find_by_email_uses_index(context) -> None:
    profile = make_profile()
    profiles.save(context, UserType.NANNY, "nina@x.com", profile)
    assert profiles.find_by_email_suffix(context, "nina@x.com") == profile
    assert profiles.find_by_email_suffix(context, "nobody@x.com") is None
    assert profiles.find_by_email_suffix(context, "") is None


def test_find_by_email_falls_back_to_ordered_scan(context) -> None:
    parent = make_profile(user_type=UserType.PARENT, email="pat@x.com", name="Pat")
    nanny = make_profile(user_type=UserType.NANNY, email="pat@x.com", name="Pat the nanny")
    write_raw(context, "parent_profile_pat@x.com", parent.model_dump_json())
    write_raw(context, "nanny_profile_pat@x.com", nanny.model_dump_json())

    # Unindexed rows resolve to the first key in sort order, every time.
    for _ in range(3):
        assert profiles.find_by_email_suffix(context, "pat@x.com") == nanny


def test_profile_completeness() -> None:
    assert profiles.is_complete(make_profile())
    assert not profiles.is_complete(make_profile(name=""))
    assert not profiles.is_complete(make_profile(age=0))
    assert not profiles.is_complete(make_profile(image_refs=[]))
    assert not profiles.is_complete(None)


def test_negative_age_is_rejected() -> None:
    with pytest.raises(ValueError):
        make_profile(age=-1)


def test_list_profiles_by_type(context) -> None:
    profiles.save(context, UserType.NANNY, "nina@x.com", make_profile())
    profiles.save(
        context,
        UserType.PARENT,
        "pat@x.com",
        make_profile(user_type=UserType.PARENT, email="pat@x.com", name="Pat"),
    )

    assert [p.name for p in profiles.list_profiles(context, UserType.NANNY)] == ["Nina"]
    assert {p.name for p in profiles.list_profiles(context)} == {"Nina", "Pat"}


def test_add_image_attaches_reference(context) -> None:
    profiles.save(context, UserType.NANNY, "nina@x.com", make_profile(image_refs=[]))

    updated = profiles.add_image(context, UserType.NANNY, "nina@x.com", b"\xff\xd8jpeg-bytes")

    assert len(updated.image_refs) == 1
    assert updated.image_refs[0].endswith(".jpg")
    assert context.images.load(updated.image_refs[0]) == b"\xff\xd8jpeg-bytes"
    assert profiles.is_complete(profiles.load(context, UserType.NANNY, "nina@x.com"))


def test_add_image_requires_profile(context) -> None:
    with pytest.raises(ValueError):
        profiles.add_image(context, UserType.NANNY, "ghost@x.com", b"bytes")


def test_extras_round_trip_per_type(context) -> None:
    nanny = NannyExtras(experience=5, hourly_rate=22.5, location="Austin", languages=["English"], available_days=["Mon"])
    parent = ParentExtras(number_of_children=2, children_ages="3, 6", location="Austin", needs_weekends=True)
    profiles.save_extras(context, UserType.NANNY, "nina@x.com", nanny)
    profiles.save_extras(context, UserType.PARENT, "pat@x.com", parent)

    assert profiles.load_extras(context, UserType.NANNY, "nina@x.com") == nanny
    assert profiles.load_extras(context, UserType.PARENT, "pat@x.com") == parent
    assert profiles.load_extras(context, UserType.PARENT, "nina@x.com") is None

    with pytest.raises(TypeError):
        profiles.save_extras(context, UserType.NANNY, "nina@x.com", parent)


def test_children_add_and_remove(context) -> None:
    first = ChildProfile(name="Lev", age=3)
    second = ChildProfile(name="Mia", age=6, gender=ChildGender.GIRL)
    profiles.add_child(context, "pat@x.com", first)
    profiles.add_child(context, "pat@x.com", second)

    assert [c.name for c in profiles.load_children(context, "pat@x.com")] == ["Lev", "Mia"]
    remaining = profiles.remove_child(context, "pat@x.com", first.id)
    assert [c.name for c in remaining] == ["Mia"]
    assert profiles.load_children(context, "") == []
