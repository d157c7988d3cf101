"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Access/refresh JWT issuance and verification via PyJWT

Access and refresh tokens are signed with separate secrets and carry a
"type" claim, so neither can be replayed as the other.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidToken(TokenError):
    pass


class TokenExpired(TokenError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str


class TokenService:
    """
    Mints and validates the two token classes.

    Everything it needs is passed in at construction; build it from the
    Flask config with `TokenService.from_config(app.config)`.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_expires: timedelta = timedelta(minutes=15),
        refresh_expires: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh secrets are required")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh secrets must differ")
        self._secrets = {ACCESS: access_secret, REFRESH: refresh_secret}
        self._expires = {ACCESS: access_expires, REFRESH: refresh_expires}
        self._algorithm = algorithm

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenService":
        return cls(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_expires=config["JWT_ACCESS_EXPIRES"],
            refresh_expires=config["JWT_REFRESH_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    @property
    def refresh_expires(self) -> timedelta:
        return self._expires[REFRESH]

    def issue_access_token(self, claims: TokenClaims) -> str:
        return self._encode(claims, ACCESS)

    def issue_refresh_token(self, claims: TokenClaims) -> str:
        return self._encode(claims, REFRESH)

    def verify_access_token(self, token: str) -> TokenClaims:
        return self._decode(token, ACCESS)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return self._decode(token, REFRESH)

    def _encode(self, claims: TokenClaims, token_type: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "userId": claims.user_id,
            "email": claims.email,
            "type": token_type,
            # jti keeps two tokens minted within the same second distinct
            "jti": generate_jti(),
            "iat": int(now.timestamp()),
            "exp": int((now + self._expires[token_type]).timestamp()),
        }
        return jwt.encode(payload, self._secrets[token_type], algorithm=self._algorithm)

    def _decode(self, token: str, expected_type: str) -> TokenClaims:
        """
        Decode and validate a JWT. Raises TokenExpired or InvalidToken.
        """
        try:
            decoded: Dict[str, Any] = jwt.decode(
                token,
                self._secrets[expected_type],
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token expired")
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(f"Invalid token: {exc}")

        if decoded.get("type") != expected_type:
            raise InvalidToken("Wrong token type")
        user_id, email = decoded.get("userId"), decoded.get("email")
        if not isinstance(user_id, str) or not isinstance(email, str):
            raise InvalidToken("Token is missing required claims")
        return TokenClaims(user_id=user_id, email=email)
