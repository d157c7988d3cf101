"""
Authentication flow: signup, login, refresh, logout, current user.

Each user holds at most one live refresh token (User.refresh_token).
Login and refresh replace it, logout clears it, and a refresh token is
only accepted while it still equals the stored value. Every
state-changing call performs exactly one write of that column.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError

from models.user import User
from models.schemas.user import UserOutSchema
from services.errors import Conflict, NotFound, Unauthorized
from utils.security import (
    TokenClaims,
    TokenError,
    TokenService,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid refresh token"

user_out_schema = UserOutSchema()


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthResult:
    user: Dict[str, Any]
    access_token: str
    refresh_token: str


class AuthService:
    """Orchestrates the credential store, password hasher and token service."""

    def __init__(self, storage, tokens: TokenService):
        self._storage = storage
        self._tokens = tokens

    @property
    def tokens(self) -> TokenService:
        return self._tokens

    def _issue_pair(self, user_id: str, email: str) -> TokenPair:
        claims = TokenClaims(user_id=user_id, email=email)
        return TokenPair(
            access_token=self._tokens.issue_access_token(claims),
            refresh_token=self._tokens.issue_refresh_token(claims),
        )

    def _find_by_email(self, email: str) -> User | None:
        session = self._storage.get_session()
        return session.query(User).filter(User.email == email).first()

    def signup(self, email: str, password: str, name: str) -> AuthResult:
        if self._find_by_email(email) is not None:
            logger.info("signup rejected: email already registered")
            raise Conflict("User with this email already exists")

        user = User(email=email, password_hash=hash_password(password), name=name)
        pair = self._issue_pair(user.id, user.email)
        # Row and its first refresh token go out in a single commit
        user.refresh_token = pair.refresh_token
        self._storage.new(user)
        try:
            self._storage.save()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            logger.info("signup rejected: unique constraint on email")
            raise Conflict("User with this email already exists")

        logger.info("user %s signed up", user.id)
        return AuthResult(
            user=user_out_schema.dump(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    def login(self, email: str, password: str) -> AuthResult:
        user = self._find_by_email(email)
        # Same error for unknown email and wrong password
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("login failed")
            raise Unauthorized(INVALID_CREDENTIALS)

        pair = self._issue_pair(user.id, user.email)
        user.refresh_token = pair.refresh_token
        self._storage.save()

        logger.info("user %s logged in", user.id)
        return AuthResult(
            user=user_out_schema.dump(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    def refresh(self, presented_token: str) -> TokenPair:
        try:
            claims = self._tokens.verify_refresh_token(presented_token)
        except TokenError as exc:
            logger.warning("refresh rejected: %s", exc)
            raise Unauthorized(INVALID_REFRESH_TOKEN)

        pair = self._issue_pair(claims.user_id, claims.email)
        # Compare-and-set: only the caller still holding the stored token wins
        swapped = self._storage.update_where(
            User,
            {User.refresh_token: pair.refresh_token},
            User.id == claims.user_id,
            User.refresh_token == presented_token,
        )
        if swapped != 1:
            logger.warning("refresh rejected for user %s: token rotated or revoked", claims.user_id)
            raise Unauthorized(INVALID_REFRESH_TOKEN)

        logger.info("user %s refreshed tokens", claims.user_id)
        return pair

    def logout(self, user_id: str) -> None:
        """Clear the stored refresh token. Safe to call repeatedly."""
        self._storage.update_where(User, {User.refresh_token: None}, User.id == user_id)
        logger.info("user %s logged out", user_id)

    def get_current_user(self, user_id: str) -> Dict[str, Any]:
        user = self._storage.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user_out_schema.dump(user)
