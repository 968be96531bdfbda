"""Refresh-token cookie transport.

Learn: The refresh token travels only in a cookie the browser's JS can't
read (HttpOnly) and won't send cross-site (SameSite=Strict). Secure is
switched on in production, where the app sits behind HTTPS; in development
plain-HTTP localhost still needs the cookie to round-trip.

Clearing the cookie must repeat the same attributes, otherwise browsers
treat it as a different cookie and keep the old one.
"""

from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from pressroom.config import Settings

REFRESH_COOKIE_NAME = "refreshToken"


class RefreshCookie:
    """Set, clear and read the refresh-token cookie."""

    name = REFRESH_COOKIE_NAME
    path = "/"
    samesite = "strict"

    def __init__(self, config: Settings):
        self.secure = config.is_production
        self.max_age = config.refresh_token_expire_days * 24 * 60 * 60

    def set(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.name,
            value=token,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self.name,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )

    def read(self, request: Request) -> Optional[str]:
        return request.cookies.get(self.name) or None
