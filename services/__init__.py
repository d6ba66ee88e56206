from typing import NamedTuple

from models.refresh_token import RefreshToken
from models.user import User


class AuthResult(NamedTuple):
    """What a successful register/login/refresh hands back to the client."""
    user: User
    refresh_token: RefreshToken
    access_token: str
