from models.base_model import Base, utcnow
from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from models.user import User

__all__ = ["Base", "DBStorage", "RefreshToken", "User", "utcnow"]
