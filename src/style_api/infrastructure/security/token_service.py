"""Signed JWT session tokens with configurable lifetime."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

from style_api.application.ports.session_token_port import (
    IssuedToken,
    SessionTokenPort,
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureError,
)

_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class JwtTokenService(SessionTokenPort):
    """Issue and verify HS256 tokens asserting one user id."""

    def __init__(
        self,
        *,
        secret: str,
        token_ttl: timedelta = timedelta(days=7),
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        if not secret:
            raise ValueError("token secret cannot be blank")
        self._secret = secret
        self._token_ttl = token_ttl
        self._now = now

    def issue(self, user_id: UUID) -> IssuedToken:
        issued_at = self._now().replace(microsecond=0)
        expires_at = issued_at + self._token_ttl
        token = jwt.encode(
            {
                "sub": str(user_id),
                "iat": int(issued_at.timestamp()),
                "exp": int(expires_at.timestamp()),
            },
            self._secret,
            algorithm=_ALGORITHM,
        )
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> UUID:
        try:
            # Expiry is checked below against the injected clock.
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidSignatureError as error:
            raise TokenSignatureError("token signature mismatch") from error
        except jwt.InvalidTokenError as error:
            raise TokenMalformedError("token cannot be decoded") from error

        expires_at = claims["exp"]
        if not isinstance(expires_at, int | float):
            raise TokenMalformedError("token exp claim is not numeric")
        if self._now().timestamp() >= expires_at:
            raise TokenExpiredError("token expired")

        try:
            return UUID(str(claims["sub"]))
        except ValueError as error:
            raise TokenMalformedError("token subject is not a user id") from error
