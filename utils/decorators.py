from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from services.errors import Unauthorized
from utils.security import TokenExpired, InvalidToken


def bearer_token() -> str | None:
    """Return the token from `Authorization: Bearer <token>`, or None if absent/malformed."""
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    token = auth.split(" ", 1)[1].strip()
    return token or None


def jwt_required():
    """
    Reject the request with 401 unless it carries a valid access token.
    On success the claims are exposed as g.token_claims and g.current_user_id.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if token is None:
                raise Unauthorized("No token provided")

            tokens = current_app.extensions["auth_service"].tokens
            try:
                claims = tokens.verify_access_token(token)
            except TokenExpired:
                raise Unauthorized("Token expired")
            except InvalidToken:
                raise Unauthorized("Invalid token")

            g.token_claims = claims
            g.current_user_id = claims.user_id
            return fn(*args, **kwargs)

        return wrapper

    return decorator
