"""Application authentication service for registration and login."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from style_api.application.ports.password_hasher_port import PasswordHasherPort
from style_api.application.ports.session_token_port import SessionTokenPort
from style_api.application.ports.user_repository_port import (
    DuplicateUserError,
    PublicUser,
    UserCreateInput,
    UserRepositoryPort,
)
from style_api.domain.auth.credentials import normalize_user_email, require_non_blank
from style_api.domain.errors import ConflictError, UnauthenticatedError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "invalid credentials"


@dataclass(frozen=True)
class AuthSession:
    """Authenticated user view plus its freshly issued session token."""

    user: PublicUser
    token: str
    expires_at: datetime


class AuthService:
    """Register accounts and exchange credentials for session tokens."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
        token_service: SessionTokenPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._token_service = token_service

    async def register(
        self,
        *,
        name: str,
        email: str,
        username: str,
        password: str,
    ) -> AuthSession:
        """Create one account after uniqueness pre-checks and return a session."""

        require_non_blank(name=name, email=email, username=username, password=password)
        normalized_email = normalize_user_email(email=email)
        normalized_username = username.strip()

        if await self._users.get_by_email(email=normalized_email) is not None:
            logger.info("auth_register_conflict field=email")
            raise ConflictError("email already in use")
        if await self._users.get_by_username(username=normalized_username) is not None:
            logger.info("auth_register_conflict field=username")
            raise ConflictError("username already in use")

        password_hash = self._password_hasher.hash_password(password)
        try:
            user = await self._users.create_user(
                UserCreateInput(
                    name=name.strip(),
                    email=normalized_email,
                    username=normalized_username,
                    password_hash=password_hash,
                )
            )
        except DuplicateUserError as error:
            logger.info("auth_register_conflict field=unique_constraint")
            raise ConflictError("email or username already in use") from error

        logger.info("auth_register_success user_id=%s", user.user_id)
        return self._open_session(user.to_public())

    async def login(self, *, email: str, password: str) -> AuthSession:
        """Verify credentials; unknown email and wrong password fail identically."""

        require_non_blank(email=email, password=password)
        user = await self._users.get_by_email(email=normalize_user_email(email=email))
        if user is None:
            logger.info("auth_login_failed reason=unknown_email")
            raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)

        is_valid = self._password_hasher.verify_password(
            password=password,
            password_hash=user.password_hash,
        )
        if not is_valid:
            logger.info("auth_login_failed reason=bad_password user_id=%s", user.user_id)
            raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("auth_login_success user_id=%s", user.user_id)
        return self._open_session(user.to_public())

    def _open_session(self, user: PublicUser) -> AuthSession:
        issued = self._token_service.issue(user.user_id)
        return AuthSession(user=user, token=issued.token, expires_at=issued.expires_at)
