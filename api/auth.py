"""
Authentication blueprint (mounted at /api/auth):
- POST /register
- POST /login
- POST /refresh
- POST /logout
- GET  /me

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues 15 minute access tokens (JWT, HS256) as JSON and as an HttpOnly cookie
- Refresh tokens are opaque random ids stored in the DB; refresh does not rotate them
"""
from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from models.schemas.user import AuthOutSchema, RefreshSchema, UserOutSchema
from models.user import User
from services import AuthResult
from utils.decorators import ACCESS_COOKIE_NAME, jwt_required
from utils.exceptions import InvalidToken, NotFound

bp = Blueprint("auth", __name__)

auth_out_schema = AuthOutSchema()
user_out_schema = UserOutSchema()
refresh_schema = RefreshSchema()


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _auth_response(result: AuthResult):
    tokens = current_app.extensions["tokens"]
    response = jsonify(auth_out_schema.dump(result))
    response.set_cookie(
        ACCESS_COOKIE_NAME,
        result.access_token,
        max_age=tokens.max_age,
        path="/",
        secure=current_app.config.get("COOKIE_SECURE", False),
        httponly=True,
        samesite="Lax",
    )
    return response, 200


@bp.post("/register")
def register():
    """
    Register a new user and start a session.
    ---
    tags:
      - Authentication
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [username, email, password]
          properties:
            username: { type: string, minLength: 3, maxLength: 50 }
            email: { type: string, format: email }
            password: { type: string, minLength: 8 }
    responses:
      200:
        description: User created, tokens issued (access token also set as cookie)
      400:
        description: Validation error
      409:
        description: Email or username already exists
    """
    payload = _json_body()
    result = current_app.extensions["credentials"].register(
        payload.get("username"),
        payload.get("email"),
        payload.get("password"),
    )
    return _auth_response(result)


@bp.post("/login")
def login():
    """
    Login with email and password.
    ---
    tags:
      - Authentication
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (returns tokens, access token also set as cookie)
      401:
        description: Invalid email or password
      403:
        description: Account is disabled
    """
    payload = _json_body()
    result = current_app.extensions["credentials"].login(
        payload.get("email"),
        payload.get("password"),
    )
    return _auth_response(result)


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access token.
    The refresh token itself is returned unchanged.
    ---
    tags:
      - Authentication
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [refresh_token]
          properties:
            refresh_token: { type: string }
    responses:
      200:
        description: New access token issued
      401:
        description: Invalid or expired refresh token
      403:
        description: Account is disabled
    """
    data = refresh_schema.load(_json_body())
    result = current_app.extensions["sessions"].refresh(data["refresh_token"])
    return _auth_response(result)


@bp.post("/logout")
def logout():
    """
    Logout: deletes the refresh token server-side. Unknown tokens are ignored.
    ---
    tags:
      - Authentication
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [refresh_token]
          properties:
            refresh_token: { type: string }
    responses:
      204:
        description: Logged out
    """
    data = refresh_schema.load(_json_body())
    current_app.extensions["sessions"].logout(data["refresh_token"])
    return ("", 204)


@bp.get("/me")
@jwt_required()
def me():
    """
    Get the current user.
    ---
    tags:
      - Authentication
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: User not found
    """
    try:
        user_id = g.current_claims.user_id
    except ValueError:
        raise InvalidToken("Invalid user ID")

    user = current_app.extensions["storage"].get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return jsonify(user_out_schema.dump(user)), 200
