"""Authentication and authorization.

Learn: Users authenticate with email/password and receive two JWTs:
1. Access token → short-lived, sent as `Authorization: Bearer ...`
2. Refresh token → 7 days, carried in an HttpOnly `refreshToken` cookie

Neither token is stored server-side, so logout only clears the cookie.
"""
