"""Pressroom — accounts and mailing list backend for a publication site.

User registration and login with short-lived access tokens and
cookie-carried refresh tokens, an admin gate, and a subscriber list
that sends a welcome email.
"""

__version__ = "0.1.0"
