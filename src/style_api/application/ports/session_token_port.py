"""Port for issuing and verifying stateless session tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class InvalidSessionTokenError(ValueError):
    """Base error for session tokens that cannot be trusted."""


class TokenMalformedError(InvalidSessionTokenError):
    """Raised when a token cannot be decoded or lacks required claims."""


class TokenExpiredError(InvalidSessionTokenError):
    """Raised when a token's expiry is in the past."""


class TokenSignatureError(InvalidSessionTokenError):
    """Raised when a token signature does not match the process secret."""


@dataclass(frozen=True)
class IssuedToken:
    """Signed token string and its absolute expiry."""

    token: str
    expires_at: datetime


class SessionTokenPort(Protocol):
    """Session token issue/verify contract."""

    def issue(self, user_id: UUID) -> IssuedToken:
        """Sign a token asserting the given user id."""

    def verify(self, token: str) -> UUID:
        """Return the asserted user id or raise `InvalidSessionTokenError`."""
