"""Shared normalization helpers for user credential inputs."""

from __future__ import annotations

import re

from style_api.domain.errors import InvalidInputError

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9._]+$")
MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 3


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank values."""

    normalized = email.strip().lower()
    if not normalized:
        raise InvalidInputError("email cannot be blank")
    return normalized


def require_non_blank(**fields: str | None) -> None:
    """Reject any missing or whitespace-only field, naming the first offender."""

    for name, value in fields.items():
        if value is None or not value.strip():
            raise InvalidInputError(f"{name} is required")


def is_valid_email(email: str) -> bool:
    return _EMAIL_PATTERN.match(email) is not None


def is_valid_username(username: str) -> bool:
    return len(username) >= MIN_USERNAME_LENGTH and _USERNAME_PATTERN.match(username) is not None


def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH
