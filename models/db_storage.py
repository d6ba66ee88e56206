import logging

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker

from models.base_model import Base
from models.refresh_token import RefreshToken  # noqa: F401  registers the table
from models.user import User  # noqa: F401  registers the table
from utils.exceptions import StorageError

logger = logging.getLogger(__name__)


def _mask(url: str) -> str:
    if "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    if "@" in rest and ":" in rest.split("@", 1)[0]:
        creds, tail = rest.split("@", 1)
        user = creds.split(":", 1)[0]
        return f"{scheme}://{user}:***@{tail}"
    return url


class DBStorage:
    """Engine (connection pool) plus a scoped session, built once per app."""

    def __init__(self, database_url: str, echo: bool = False):
        if not database_url:
            raise RuntimeError("DATABASE_URL is required")
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)

        if database_url.startswith("sqlite"):
            self.__engine = create_engine(
                database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
            )

            # SQLite only enforces foreign keys when asked to
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
        else:
            self.__engine = create_engine(
                database_url,
                echo=echo,
                pool_pre_ping=True,
                pool_recycle=1800,
            )
        self.__session = None
        logger.info("Database: %s", _mask(database_url))

    def reload(self):
        """Create tables and start session"""
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """
        Commit session.
        IntegrityError is re-raised as is so callers can map constraint
        violations; any other database failure becomes StorageError.
        """
        try:
            self.__session.commit()
        except IntegrityError:
            self.__session.rollback()
            raise
        except SQLAlchemyError as exc:
            self.__session.rollback()
            raise StorageError(f"Commit failed: {exc}") from exc

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj is not None:
            self.__session.delete(obj)

    def get(self, cls, id):
        """Fetch one object by class and primary key"""
        try:
            return self.__session.get(cls, id)
        except SQLAlchemyError as exc:
            raise StorageError(f"Lookup of {cls.__name__} failed: {exc}") from exc

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    def dispose(self):
        self.close()
        self.__engine.dispose()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
