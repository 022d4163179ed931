"""Bcrypt password hasher adapter."""

from __future__ import annotations

import base64
import hashlib

import bcrypt

from style_api.application.ports.password_hasher_port import PasswordHasherPort

DEFAULT_BCRYPT_ROUNDS = 10
BCRYPT_MAX_PASSWORD_BYTES = 72


def _bcrypt_input(password: str) -> bytes:
    """Encode a password, digesting inputs bcrypt would refuse as too long."""

    encoded = password.encode("utf-8")
    if len(encoded) <= BCRYPT_MAX_PASSWORD_BYTES:
        return encoded
    return base64.b64encode(hashlib.sha256(encoded).digest())


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt with a tunable work factor."""

    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_bcrypt_input(password), salt).decode("utf-8")

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_bcrypt_input(password), password_hash.encode("utf-8"))
        except ValueError:
            return False
