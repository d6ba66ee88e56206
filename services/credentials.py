from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.schemas.user import LoginSchema, RegisterSchema
from models.user import User
from services import AuthResult
from utils.exceptions import (
    AccountDisabled,
    Conflict,
    InvalidCredentials,
    StorageError,
)
from utils.security import generate_token_id, hash_password, verify_password

logger = logging.getLogger(__name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash checked against when the email is unknown, so both failures cost one verify."""
    return hash_password(generate_token_id())


class CredentialService:
    """Registration and password login."""

    def __init__(self, storage, tokens, refresh_tokens):
        self.storage = storage
        self.tokens = tokens
        self.refresh_tokens = refresh_tokens

    def register(self, username, email, password) -> AuthResult:
        # raises marshmallow.ValidationError before anything touches storage
        data = register_schema.load(
            {"username": username, "email": email, "password": password}
        )

        user = User(
            username=data["username"],
            email=data["email"],
            password_hash=hash_password(data["password"]),
        )
        self.storage.new(user)
        try:
            self.storage.save()
        except IntegrityError as exc:
            logger.info("Registration rejected, duplicate key: %s", exc.orig)
            raise Conflict() from exc

        logger.info("Registered user %s", user.id)
        return self._start_session(user)

    def login(self, email, password) -> AuthResult:
        data = login_schema.load({"email": email, "password": password})

        session = self.storage.get_session()
        try:
            user = session.query(User).filter(User.email == data["email"]).first()
        except SQLAlchemyError as exc:
            raise StorageError(f"User lookup failed: {exc}") from exc

        if user is None:
            verify_password(data["password"], _dummy_hash())
            raise InvalidCredentials()
        if not user.is_active:
            raise AccountDisabled()
        if not verify_password(data["password"], user.password_hash):
            raise InvalidCredentials()

        logger.info("User %s logged in", user.id)
        return self._start_session(user)

    def _start_session(self, user: User) -> AuthResult:
        access_token = self.tokens.issue(user.id, user.email)
        refresh_token = self.refresh_tokens.create(user.id)
        return AuthResult(user=user, refresh_token=refresh_token, access_token=access_token)
