from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel


class User(BaseModel, Base):
    __tablename__ = "users"

    username = Column(String(50), nullable=False, unique=True, index=True)
    # Stored lower-cased; the schemas normalize before lookup/insert
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
