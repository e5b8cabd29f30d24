"""Errors raised by the account, profile and widget helpers."""
from __future__ import annotations


class CareMatchError(Exception):
    """Base class for errors surfaced back to the user as inline text."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CareMatchError):
    """Missing or mismatched input. Nothing was persisted."""


class AuthError(CareMatchError):
    """Credentials did not match a stored account. Session left untouched."""
