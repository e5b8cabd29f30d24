"""Account registration, login and session helpers."""
from __future__ import annotations

import logging
import re
from typing import List

from .context import AppContext
from .errors import AuthError, ValidationError
from .schemas import Account, Session, UserType

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def accounts_key(user_type: UserType) -> str:
    return f"{user_type.value}Users"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def _account_rows(ctx: AppContext, user_type: UserType) -> List[dict]:
    raw = ctx.store.get(accounts_key(user_type), [])
    if not isinstance(raw, list):
        return []
    return [row for row in raw if isinstance(row, dict)]


def list_accounts(ctx: AppContext, user_type: UserType) -> List[Account]:
    rows = _account_rows(ctx, user_type)
    accounts: List[Account] = []
    for row in rows:
        try:
            accounts.append(
                Account(
                    username=row.get("username", ""),
                    email=row.get("email", ""),
                    password=row.get("password", ""),
                    user_type=user_type,
                )
            )
        except ValueError:
            continue
    return accounts


def register(
    ctx: AppContext,
    user_type: UserType,
    username: str,
    email: str,
    password: str,
    confirm_password: str,
) -> Account:
    if not all(value.strip() for value in (username, email, password, confirm_password)):
        raise ValidationError("Please fill in all fields.")
    if password != confirm_password:
        raise ValidationError("Passwords do not match.")
    if user_type is UserType.PARENT and not is_valid_email(email):
        raise ValidationError("Please enter a valid email address.")

    rows = _account_rows(ctx, user_type)
    if any(row.get("email") == email for row in rows):
        logger.warning("Registering another %s account for an existing email", user_type.value)
    rows.append({"username": username, "email": email, "password": password})
    ctx.store.set(accounts_key(user_type), rows)
    logger.info("Registered %s account for %s", user_type.value, email)
    return Account(username=username, email=email, password=password, user_type=user_type)


def login(ctx: AppContext, user_type: UserType, email: str, password: str) -> Session:
    matched = any(
        account.email == email and account.password == password
        for account in list_accounts(ctx, user_type)
    )
    if not matched:
        logger.warning("Failed %s login attempt", user_type.value)
        raise AuthError("Invalid credentials")

    session = Session(
        logged_in=True,
        user_type=user_type,
        logged_in_email=email if user_type is UserType.PARENT else None,
    )
    ctx.write_session(session)
    logger.info("Logged in %s account", user_type.value)
    return session


def logout(ctx: AppContext) -> None:
    ctx.write_session(Session())
    logger.info("Logged out")


def current_session(ctx: AppContext) -> Session:
    return ctx.session
