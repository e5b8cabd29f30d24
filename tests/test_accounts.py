from __future__ import annotations

import pytest

from carematch import accounts
from carematch.config import AppConfig
from carematch.context import AppContext
from carematch.errors import AuthError, CareMatchError, ValidationError
from carematch.schemas import Session, UserType

from .helpers import write_raw


@pytest.mark.parametrize(
    "username,email,password,confirm",
    [
        ("", "a@b.com", "pw", "pw"),
        ("Alice", "", "pw", "pw"),
        ("Alice", "a@b.com", "", ""),
        ("Alice", "a@b.com", "pw", ""),
        ("   ", "a@b.com", "pw", "pw"),
    ],
)
def test_register_requires_every_field(context, username, email, password, confirm) -> None:
    with pytest.raises(ValidationError):
        accounts.register(context, UserType.NANNY, username, email, password, confirm)
    assert accounts.list_accounts(context, UserType.NANNY) == []


def test_register_rejects_mismatched_passwords(context) -> None:
    with pytest.raises(ValidationError, match="do not match"):
        accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "one", "two")
    assert accounts.list_accounts(context, UserType.PARENT) == []


def test_parent_email_must_look_like_an_email(context) -> None:
    for bad in ["alice", "alice@x", "alice@.com", "@x.com"]:
        with pytest.raises(ValidationError):
            accounts.register(context, UserType.PARENT, "Alice", bad, "pw", "pw")
    assert accounts.list_accounts(context, UserType.PARENT) == []


def test_nanny_email_is_not_pattern_checked(context) -> None:
    account = accounts.register(context, UserType.NANNY, "Nina", "nina", "pw", "pw")
    assert account.email == "nina"
    assert [a.email for a in accounts.list_accounts(context, UserType.NANNY)] == ["nina"]


def test_accounts_are_partitioned_by_user_type(context) -> None:
    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "pw", "pw")
    assert accounts.list_accounts(context, UserType.NANNY) == []
    with pytest.raises(AuthError):
        accounts.login(context, UserType.NANNY, "alice@x.com", "pw")


def test_duplicate_emails_are_kept(context) -> None:
    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "one", "one")
    accounts.register(context, UserType.PARENT, "Alice 2", "alice@x.com", "two", "two")

    stored = accounts.list_accounts(context, UserType.PARENT)
    assert [a.username for a in stored] == ["Alice", "Alice 2"]
    assert accounts.login(context, UserType.PARENT, "alice@x.com", "two").logged_in


def test_register_then_login(context) -> None:
    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "secret", "secret")
    session = accounts.login(context, UserType.PARENT, "alice@x.com", "secret")

    assert session == Session(logged_in=True, user_type=UserType.PARENT, logged_in_email="alice@x.com")
    assert accounts.current_session(context) == session
    assert context.store.get("isLoggedIn") is True
    assert context.store.get("loggedInUserType") == "parent"
    assert context.store.get("loggedInEmail") == "alice@x.com"


def test_wrong_password_leaves_session_unchanged(context) -> None:
    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "secret", "secret")
    before = accounts.current_session(context)

    with pytest.raises(AuthError):
        accounts.login(context, UserType.PARENT, "alice@x.com", "Secret")

    assert accounts.current_session(context) == before
    assert context.store.get("isLoggedIn", False) is False
    assert context.store.get("loggedInEmail") is None


def test_login_is_case_sensitive_on_email(context) -> None:
    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "secret", "secret")
    with pytest.raises(AuthError):
        accounts.login(context, UserType.PARENT, "Alice@x.com", "secret")


def test_nanny_login_does_not_record_email(context) -> None:
    accounts.register(context, UserType.NANNY, "Nina", "nina@x.com", "pw", "pw")
    session = accounts.login(context, UserType.NANNY, "nina@x.com", "pw")

    assert session.logged_in
    assert session.user_type is UserType.NANNY
    assert session.logged_in_email is None
    assert context.store.get("loggedInEmail") is None


def test_logout_clears_session(context) -> None:
    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "secret", "secret")
    accounts.login(context, UserType.PARENT, "alice@x.com", "secret")

    accounts.logout(context)

    assert accounts.current_session(context) == Session()
    assert context.store.get("isLoggedIn") is False
    assert not context.store.contains("loggedInUserType")
    assert not context.store.contains("loggedInEmail")


def test_logout_without_session_succeeds(context) -> None:
    accounts.logout(context)
    assert accounts.current_session(context) == Session()


def test_session_survives_reopen(context, tmp_path) -> None:
    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "secret", "secret")
    accounts.login(context, UserType.PARENT, "alice@x.com", "secret")

    reopened = AppContext.open(AppConfig(), database_path=context.store.path, image_dir=tmp_path / "images")
    assert reopened.session == Session(logged_in=True, user_type=UserType.PARENT, logged_in_email="alice@x.com")


def test_closed_context_refuses_store_access(tmp_path) -> None:
    ctx = AppContext.open(AppConfig(), database_path=tmp_path / "closed.db", image_dir=tmp_path / "images")
    ctx.close()
    ctx.close()

    assert ctx.closed
    with pytest.raises(CareMatchError, match="closed"):
        accounts.list_accounts(ctx, UserType.PARENT)


def test_malformed_account_list_reads_as_empty(context) -> None:
    write_raw(context, accounts.accounts_key(UserType.PARENT), '{"oops": 1}')
    assert accounts.list_accounts(context, UserType.PARENT) == []

    accounts.register(context, UserType.PARENT, "Alice", "alice@x.com", "pw", "pw")
    assert [a.email for a in accounts.list_accounts(context, UserType.PARENT)] == ["alice@x.com"]

    write_raw(
        context,
        accounts.accounts_key(UserType.NANNY),
        '["not a row", {"username": "Nina", "email": "nina@x.com", "password": "pw"}]',
    )
    assert [a.email for a in accounts.list_accounts(context, UserType.NANNY)] == ["nina@x.com"]
