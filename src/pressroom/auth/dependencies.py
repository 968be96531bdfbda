"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers. The first group
builds the auth collaborators from the injected Settings; the second
resolves the caller:

1. get_current_user → Bearer access token → User (401 if missing/invalid)
2. require_admin → get_current_user + role check (401 if not admin)

require_admin is the authorization gate: a binary admin/not-admin
policy, no role hierarchy.
"""

from typing import Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.auth.cookies import RefreshCookie
from pressroom.auth.jwt import TokenError, TokenIssuer
from pressroom.config import Settings, get_settings
from pressroom.db.engine import get_db
from pressroom.db.models import User
from pressroom.errors import AuthError, AuthorizationError
from pressroom.services.email_service import EmailSender
from pressroom.services.user_service import UserService

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ─── Collaborators ──────────────────────────────────────


def get_token_issuer(config: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(config)


def get_refresh_cookie(config: Settings = Depends(get_settings)) -> RefreshCookie:
    return RefreshCookie(config)


def get_email_sender(config: Settings = Depends(get_settings)) -> EmailSender:
    return EmailSender(config)


def get_user_service(
    db: AsyncSession = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, bcrypt_rounds=config.bcrypt_rounds)


# ─── Identity ───────────────────────────────────────────


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
    users: UserService = Depends(get_user_service),
) -> User:
    """Resolve the caller from a Bearer access token."""
    if credentials is None:
        raise AuthError("Authentication required")

    try:
        payload = issuer.decode_access_token(credentials.credentials)
    except TokenError as e:
        logger.info("access_token_rejected", reason=str(e))
        raise AuthError("Invalid or expired access token")

    user = await users.find_by_id(payload["sub"])
    if user is None:
        raise AuthError("User not found")
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Let admins through unchanged, reject everyone else."""
    if not current_user.is_admin:
        logger.info("admin_required", user_id=str(current_user.id), role=current_user.role)
        raise AuthorizationError()
    return current_user
