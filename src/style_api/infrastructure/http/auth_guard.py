"""Bearer token parsing and per-request identity resolution."""

from __future__ import annotations

import logging

from style_api.application.ports.session_token_port import (
    InvalidSessionTokenError,
    SessionTokenPort,
)
from style_api.application.ports.user_repository_port import PublicUser, UserRepositoryPort
from style_api.domain.errors import InternalError, NotFoundError, UnauthenticatedError

logger = logging.getLogger(__name__)


class MissingAuthTokenError(UnauthenticatedError):
    """Raised when a bearer token is required but not provided."""


class InvalidAuthTokenError(UnauthenticatedError):
    """Raised when the bearer header or the token itself cannot be trusted."""


def extract_bearer_token(authorization_header: str | None) -> str:
    """Extract token from standard `Authorization: Bearer <token>` header."""

    if authorization_header is None or not authorization_header.strip():
        raise MissingAuthTokenError("missing bearer token")

    parts = authorization_header.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise InvalidAuthTokenError("invalid bearer token header")

    return parts[1]


class AccessGuard:
    """Resolve the authenticated caller from a bearer token."""

    def __init__(
        self,
        *,
        token_service: SessionTokenPort,
        user_repository: UserRepositoryPort,
    ) -> None:
        self._token_service = token_service
        self._user_repository = user_repository

    async def require_user(self, *, authorization_header: str | None) -> PublicUser:
        """Return the live user asserted by the bearer token."""

        token = extract_bearer_token(authorization_header)
        try:
            user_id = self._token_service.verify(token)
        except InvalidSessionTokenError as error:
            logger.info("auth_guard_token_rejected reason=%s", type(error).__name__)
            raise InvalidAuthTokenError("invalid or expired auth token") from error

        try:
            user = await self._user_repository.get_by_id(user_id=user_id)
        except Exception as error:  # noqa: BLE001
            logger.exception("auth_guard_user_lookup_failed user_id=%s", user_id)
            raise InternalError() from error

        if user is None:
            raise NotFoundError("user not found")
        return user.to_public()
