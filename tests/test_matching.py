from __future__ import annotations

from carematch import matching
from carematch.schemas import UserType

from .helpers import seed_complete_profile


def test_like_is_only_a_match_when_mutual(context) -> None:
    assert matching.like(context, "pat@x.com", "nina@x.com") is False
    assert matching.matches(context, "pat@x.com") == []

    assert matching.like(context, "nina@x.com", "pat@x.com") is True
    assert matching.matches(context, "pat@x.com") == ["nina@x.com"]
    assert matching.matches(context, "nina@x.com") == ["pat@x.com"]


def test_repeat_likes_do_not_duplicate(context) -> None:
    matching.like(context, "pat@x.com", "nina@x.com")
    matching.like(context, "pat@x.com", "nina@x.com")
    assert matching.likes(context, "pat@x.com") == ["nina@x.com"]


def test_self_like_is_ignored(context) -> None:
    assert matching.like(context, "pat@x.com", "pat@x.com") is False
    assert matching.likes(context, "pat@x.com") == []


def test_candidates_are_opposite_type_and_unseen(context) -> None:
    seed_complete_profile(context, UserType.PARENT, "pat@x.com", name="Pat")
    seed_complete_profile(context, UserType.NANNY, "nina@x.com", name="Nina")
    seed_complete_profile(context, UserType.NANNY, "noor@x.com", name="Noor")
    seed_complete_profile(context, UserType.PARENT, "paula@x.com", name="Paula")

    names = [p.name for p in matching.candidates(context, "pat@x.com", UserType.PARENT)]
    assert sorted(names) == ["Nina", "Noor"]

    matching.like(context, "pat@x.com", "nina@x.com")
    names = [p.name for p in matching.candidates(context, "pat@x.com", UserType.PARENT)]
    assert names == ["Noor"]


def test_unmatch_removes_both_sides(context) -> None:
    matching.like(context, "pat@x.com", "nina@x.com")
    matching.like(context, "nina@x.com", "pat@x.com")
    matching.unmatch(context, "pat@x.com", "nina@x.com")
    assert matching.matches(context, "pat@x.com") == []
    assert matching.matches(context, "nina@x.com") == []
