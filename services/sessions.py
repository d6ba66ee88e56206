from __future__ import annotations

import logging

from models.user import User
from services import AuthResult
from utils.exceptions import (
    AccountDisabled,
    InvalidRefreshToken,
    NotFound,
    RefreshTokenExpired,
)

logger = logging.getLogger(__name__)


class SessionService:
    """
    Refresh and logout on top of the refresh token store.

    Refresh does not rotate: the same refresh token stays valid until
    it expires or the client logs out.
    """

    def __init__(self, storage, tokens, refresh_tokens):
        self.storage = storage
        self.tokens = tokens
        self.refresh_tokens = refresh_tokens

    def refresh(self, refresh_token_id: str) -> AuthResult:
        try:
            record = self.refresh_tokens.find(refresh_token_id)
        except NotFound as exc:
            raise InvalidRefreshToken() from exc

        if self.refresh_tokens.invalidate_if_expired(record):
            raise RefreshTokenExpired()

        user = self.storage.get(User, record.user_id)
        if user is None:
            raise InvalidRefreshToken("User not found")
        if not user.is_active:
            raise AccountDisabled()

        access_token = self.tokens.issue(user.id, user.email)
        logger.debug("Issued access token for user %s via refresh", user.id)
        return AuthResult(user=user, refresh_token=record, access_token=access_token)

    def logout(self, refresh_token_id: str) -> None:
        self.refresh_tokens.delete(refresh_token_id)
        logger.debug("Refresh token revoked")
