from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request

from utils.exceptions import InvalidToken

ACCESS_COOKIE_NAME = "access_token"


def extract_token() -> Optional[str]:
    """Cookie first, then the Authorization: Bearer header."""
    token = request.cookies.get(ACCESS_COOKIE_NAME)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None


def jwt_required():
    """
    Reject the request with 401 unless it carries a valid access token.
    On success the verified Claims are available as g.current_claims.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_token()
            if not token:
                raise InvalidToken("Missing authentication token")

            tokens = current_app.extensions["tokens"]
            g.current_claims = tokens.verify(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
