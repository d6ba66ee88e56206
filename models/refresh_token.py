"""
RefreshToken model: opaque, server-side refresh sessions.
Fields:
- id (primary key) - random string, doubles as the bearer secret
- user_id (Integer) - FK to users.id
- expires_at, created_at

Rows are never updated in place: created on login/registration,
deleted on logout or when found expired.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from models.base_model import Base, utcnow


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now=None) -> bool:
        return self.expires_at < (now or utcnow())

    def __repr__(self):
        # never render the id, it is the bearer secret
        return f"<RefreshToken user_id={self.user_id} expires_at={self.expires_at}>"
