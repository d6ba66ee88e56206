"""
Environment-aware configuration.
Values are read once from the environment (and .env) and handed to the
services by create_app(); nothing reads os.environ at request time.
"""
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _env_bool(key: str, default: bool) -> bool:
    v = os.getenv(key)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


class BaseConfig:
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # CORS: comma-separated list of origins; credentials are allowed for the cookie
    CORS_ORIGINS = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
        if o.strip()
    ]

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///database.db")
    SQLALCHEMY_ECHO = _env_bool("SQLALCHEMY_ECHO", False)

    # Unset means "fall back to the insecure default" (see TokenIssuer.from_config)
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    REQUIRE_JWT_SECRET = False
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES = timedelta(days=30)
    COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"


class ProductionConfig(BaseConfig):
    DEBUG = False
    DATABASE_URL = os.getenv("DATABASE_URL")
    REQUIRE_JWT_SECRET = True
    COOKIE_SECURE = _env_bool("COOKIE_SECURE", True)


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/test).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
