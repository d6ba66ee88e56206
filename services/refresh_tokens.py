"""
Refresh token store: opaque, server-side session records.

Expiry is enforced lazily; nothing sweeps expired rows in the background.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from utils.exceptions import NotFound, StorageError
from utils.security import generate_token_id

logger = logging.getLogger(__name__)

REFRESH_TOKEN_EXPIRES = timedelta(days=30)


class RefreshTokenStore:
    def __init__(self, storage, expires: timedelta = REFRESH_TOKEN_EXPIRES):
        self.storage = storage
        self.expires = expires

    def create(self, user_id: int, now: Optional[datetime] = None) -> RefreshToken:
        now = now or utcnow()
        record = RefreshToken(
            id=generate_token_id(),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.expires,
        )
        self.storage.new(record)
        self.storage.save()
        return record

    def find(self, token_id: str) -> RefreshToken:
        record = self.storage.get(RefreshToken, token_id)
        if record is None:
            raise NotFound("Refresh token not found")
        return record

    def invalidate_if_expired(self, record: RefreshToken, now: Optional[datetime] = None) -> bool:
        if not record.is_expired(now):
            return False
        self.storage.delete(record)
        self.storage.save()
        logger.info("Purged expired refresh token for user %s", record.user_id)
        return True

    def delete(self, token_id: str) -> None:
        session = self.storage.get_session()
        try:
            session.query(RefreshToken).filter(RefreshToken.id == token_id).delete()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(f"Refresh token delete failed: {exc}") from exc
        self.storage.save()
