"""
security helpers:
- Argon2id password hashing via argon2-cffi
- Access-token (JWT, HS256) issuance/verification via PyJWT
- Random identifiers for refresh tokens
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher, Type
from argon2.exceptions import (
    HashingError as Argon2HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from utils.exceptions import HashingError, InvalidToken

logger = logging.getLogger(__name__)

# Argon2id, OWASP minimums: 19 MiB memory, 2 iterations, 1 lane
ARGON2_MEMORY_COST = 19456  # KiB
ARGON2_TIME_COST = 2
ARGON2_PARALLELISM = 1
ARGON2_HASH_LEN = 32
ARGON2_SALT_LEN = 16

ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
INSECURE_DEFAULT_SECRET = "your-secret-key-change-this-in-production"

ph = PasswordHasher(
    time_cost=ARGON2_TIME_COST,
    memory_cost=ARGON2_MEMORY_COST,
    parallelism=ARGON2_PARALLELISM,
    hash_len=ARGON2_HASH_LEN,
    salt_len=ARGON2_SALT_LEN,
    type=Type.ID,
)


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2id with a fresh random salt."""
    try:
        return ph.hash(password)
    except Argon2HashingError as exc:
        raise HashingError(f"Password hashing failed: {exc}") from exc


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a plaintext password against a stored Argon2 hash.
    A wrong password is False; a malformed hash is a HashingError.
    """
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except InvalidHashError as exc:
        raise HashingError("Stored password hash is malformed") from exc
    except VerificationError as exc:
        raise HashingError(f"Password verification failed: {exc}") from exc


def generate_token_id() -> str:
    """128 bits from the OS CSPRNG, hex encoded."""
    return secrets.token_hex(16)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Claims:
    sub: str
    email: str
    iat: int
    exp: int

    @property
    def user_id(self) -> int:
        return int(self.sub)


class TokenIssuer:
    """Signs and verifies short-lived access tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires: timedelta = ACCESS_TOKEN_EXPIRES,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expires = expires

    @classmethod
    def from_config(cls, config) -> "TokenIssuer":
        """
        Build from a Flask config mapping.
        Without JWT_SECRET, production refuses to start and every other
        environment falls back to a well-known default.
        """
        secret = config.get("JWT_SECRET")
        if not secret:
            if config.get("REQUIRE_JWT_SECRET"):
                raise RuntimeError("JWT_SECRET must be set in this environment")
            logger.warning(
                "JWT_SECRET not set, using the built-in default secret. "
                "Access tokens can be forged by anyone who knows it. "
                "NOT SECURE FOR PRODUCTION."
            )
            secret = INSECURE_DEFAULT_SECRET
        return cls(
            secret,
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            expires=config.get("ACCESS_TOKEN_EXPIRES", ACCESS_TOKEN_EXPIRES),
        )

    @property
    def max_age(self) -> int:
        return int(self.expires.total_seconds())

    def issue(self, user_id, email: str, now: Optional[datetime] = None) -> str:
        issued_at = int((now or _now()).timestamp())
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.max_age,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Claims:
        """
        Decode and validate a JWT. Raises InvalidToken on bad signature,
        malformed structure, missing claims or expiry.
        A token is still valid during its exp second and rejected after it.
        """
        try:
            decoded = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "email", "iat", "exp"], "verify_exp": False},
            )
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected invalid access token: %s", exc)
            raise InvalidToken() from exc

        exp = decoded["exp"]
        if not isinstance(exp, int) or isinstance(exp, bool):
            logger.warning("Rejected access token with non-integer exp")
            raise InvalidToken()
        if _now().timestamp() > exp:
            logger.warning("Rejected expired access token")
            raise InvalidToken()

        return Claims(
            sub=decoded["sub"],
            email=decoded["email"],
            iat=decoded["iat"],
            exp=decoded["exp"],
        )
