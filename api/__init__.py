import logging
import sys

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from models.db_storage import DBStorage
from services.credentials import CredentialService
from services.refresh_tokens import RefreshTokenStore
from services.sessions import SessionService
from utils.security import TokenIssuer

from .config import get_config
from .errors import register_error_handlers

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Session Auth API",
        "version": "0.1.0",
        "description": "User registration, login and JWT sessions with server-side refresh tokens.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    The storage, the token issuer and the auth services are built here from
    the config and kept in app.extensions, so each app (and each test) gets
    its own set.
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    # no-op when the host (gunicorn, pytest) already configured logging
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        stream=sys.stdout,
    )

    # Cookies are sent cross-origin only with explicit origins + credentials
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", [])}},
        supports_credentials=True,
    )

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    tokens = TokenIssuer.from_config(app.config)
    storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQLALCHEMY_ECHO", False))
    storage.reload()
    refresh_tokens = RefreshTokenStore(storage, expires=app.config["REFRESH_TOKEN_EXPIRES"])

    app.extensions["storage"] = storage
    app.extensions["tokens"] = tokens
    app.extensions["refresh_tokens"] = refresh_tokens
    app.extensions["credentials"] = CredentialService(storage, tokens, refresh_tokens)
    app.extensions["sessions"] = SessionService(storage, tokens, refresh_tokens)

    from .health import bp as health_bp
    from .auth import bp as auth_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Session Auth API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
