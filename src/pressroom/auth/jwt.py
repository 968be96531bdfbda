"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Access token: short-lived (15min), used for API calls
- Refresh token: long-lived (7 days), used only to mint new access tokens

Each kind has its own signing secret, so a leaked access-token secret
can't be used to forge refresh tokens and vice versa. Every token
carries a random `jti`, which keeps two tokens minted for the same user
in the same second distinct.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from pressroom.config import Settings
from pressroom.db.models import User
from pressroom.errors import ConfigurationError

ACCESS = "access"
REFRESH = "refresh"


class TokenError(Exception):
    """Raised when token verification fails."""


class TokenIssuer:
    """Mints and verifies access/refresh tokens from an explicit Settings."""

    def __init__(self, config: Settings):
        if not config.access_token_secret:
            raise ConfigurationError("access token secret is not configured")
        if not config.refresh_token_secret:
            raise ConfigurationError("refresh token secret is not configured")
        self.access_secret = config.access_token_secret
        self.refresh_secret = config.refresh_token_secret
        self.algorithm = config.jwt_algorithm
        self.access_ttl = timedelta(minutes=config.access_token_expire_minutes)
        self.refresh_ttl = timedelta(days=config.refresh_token_expire_days)

    def issue_access_token(self, user: User) -> str:
        """Create a JWT access token carrying the user id and role."""
        return self._encode(
            {"sub": str(user.id), "role": user.role},
            token_type=ACCESS,
            secret=self.access_secret,
            ttl=self.access_ttl,
        )

    def issue_refresh_token(self, user: User) -> str:
        """Create a JWT refresh token carrying the user id."""
        return self._encode(
            {"sub": str(user.id)},
            token_type=REFRESH,
            secret=self.refresh_secret,
            ttl=self.refresh_ttl,
        )

    def decode_access_token(self, token: str) -> dict:
        return self._decode(token, token_type=ACCESS, secret=self.access_secret)

    def decode_refresh_token(self, token: str) -> dict:
        return self._decode(token, token_type=REFRESH, secret=self.refresh_secret)

    def _encode(
        self,
        claims: dict,
        token_type: str,
        secret: str,
        ttl: timedelta,
        now: Optional[datetime] = None,
    ) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            **claims,
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, token_type: str, secret: str) -> dict:
        """Verify signature, expiry and token type.

        Returns the payload dict on success.
        Raises TokenError on failure.
        """
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")
        if payload.get("type") != token_type:
            raise TokenError(f"Wrong token type, expected {token_type}")
        return payload
