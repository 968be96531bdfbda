"""Auth API — registration, login, logout, token refresh.

Learn: Routes for the session lifecycle:
- POST /auth/register → create account, issue access + refresh tokens
- POST /auth/login → email/password → tokens (body carries only refresh)
- POST /auth/logout → clear the refresh cookie
- POST /auth/refresh → refresh cookie → new access token, rotated cookie
- GET /auth/me → current user (Bearer access token)

The refresh token is always set as the `refreshToken` cookie. What the
JSON body carries differs per endpoint, and so do the status codes for
a bad refresh token (404 on logout, 403 on refresh). Clients depend on
both, so they stay as they are.
"""

import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError

from pressroom.auth.cookies import RefreshCookie
from pressroom.auth.dependencies import (
    get_current_user,
    get_refresh_cookie,
    get_token_issuer,
    get_user_service,
)
from pressroom.auth.jwt import TokenError, TokenIssuer
from pressroom.db.models import User
from pressroom.errors import (
    AuthError,
    ErrorKind,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from pressroom.schemas.auth import (
    Envelope,
    LoginData,
    LoginRequest,
    RefreshResponse,
    RegisterData,
    RegisterRequest,
    UserRead,
)
from pressroom.services.user_service import EmailAlreadyRegistered, UserService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth")

INVALID_CREDENTIALS = "Invalid email or password"


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=Envelope[RegisterData])
async def register(
    body: RegisterRequest,
    response: Response,
    users: UserService = Depends(get_user_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    cookie: RefreshCookie = Depends(get_refresh_cookie),
):
    """Create a new user account and start a session."""
    if not all((body.firstname, body.lastname, body.email, body.password)):
        raise ValidationError("All fields are required.")

    try:
        user = await users.create(
            firstname=body.firstname,
            lastname=body.lastname,
            email=body.email,
            password=body.password,
        )
    except EmailAlreadyRegistered as e:
        logger.info("register_conflict", email=body.email)
        raise InternalError(
            "User not registered, try again", kind=ErrorKind.CONFLICT
        ) from e
    except SQLAlchemyError as e:
        raise InternalError("User not registered, try again") from e

    access_token = issuer.issue_access_token(user)
    refresh_token = issuer.issue_refresh_token(user)
    cookie.set(response, refresh_token)

    logger.info("user_registered", user_id=str(user.id))
    return Envelope[RegisterData](
        message="User registered successfully",
        data=RegisterData(
            user=UserRead.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=Envelope[LoginData])
async def login(
    body: LoginRequest,
    response: Response,
    users: UserService = Depends(get_user_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    cookie: RefreshCookie = Depends(get_refresh_cookie),
):
    """Login with email and password.

    Unknown email and wrong password give the same 404 and message, so
    the endpoint can't be used to probe which emails have accounts.
    """
    try:
        user = await users.find_by_email(body.email) if body.email else None
    except SQLAlchemyError as e:
        raise InternalError("User not logged in") from e

    if user is None or not body.password or not users.verify_password(user, body.password):
        logger.info("login_failed")
        raise NotFoundError(INVALID_CREDENTIALS)

    refresh_token = issuer.issue_refresh_token(user)
    cookie.set(response, refresh_token)

    logger.info("user_logged_in", user_id=str(user.id))
    return Envelope[LoginData](
        message="User logged in successfully",
        data=LoginData(
            user=UserRead.model_validate(user),
            refresh_token=refresh_token,
        ),
    )


# ─── Logout ──────────────────────────────────────────────


@router.post(
    "/logout", response_model=Envelope[None], response_model_exclude_none=True
)
async def logout(
    request: Request,
    response: Response,
    issuer: TokenIssuer = Depends(get_token_issuer),
    cookie: RefreshCookie = Depends(get_refresh_cookie),
):
    """Clear the refresh cookie.

    Tokens aren't tracked server-side, so a copy of the refresh token
    held elsewhere stays valid until it expires.
    """
    token = cookie.read(request)
    if not token:
        raise AuthError("No token")

    try:
        payload = issuer.decode_refresh_token(token)
    except TokenError as e:
        logger.info("logout_token_rejected", reason=str(e))
        raise NotFoundError("Invalid token or token has expired")

    cookie.clear(response)
    logger.info("user_logged_out", user_id=payload["sub"])
    return Envelope[None](message=f"User {payload['sub']} logged out successfully")


# ─── Refresh ────────────────────────────────────────────


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    request: Request,
    response: Response,
    users: UserService = Depends(get_user_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    cookie: RefreshCookie = Depends(get_refresh_cookie),
):
    """Exchange the refresh cookie for a new access token.

    The refresh token is rotated too, but only through the cookie.
    """
    token = cookie.read(request)
    if not token:
        raise AuthError("Not authorized")

    try:
        payload = issuer.decode_refresh_token(token)
    except TokenError as e:
        logger.info("refresh_token_rejected", reason=str(e))
        raise ForbiddenError("Invalid or expired refresh token")

    try:
        user = await users.find_by_id(payload["sub"])
    except SQLAlchemyError as e:
        logger.error("refresh_lookup_failed", error=str(e))
        raise ForbiddenError("Invalid or expired refresh token") from e
    if user is None:
        raise ForbiddenError("User not found")

    access_token = issuer.issue_access_token(user)
    cookie.set(response, issuer.issue_refresh_token(user))

    logger.info("refresh_rotated", user_id=str(user.id))
    return RefreshResponse(access_token=access_token)


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return current_user
