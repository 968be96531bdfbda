"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Health, auth and subscriber routers are all open at the router
level. Protection is per-route: /auth/me needs a Bearer token and the
subscriber admin routes depend on require_admin.
"""

from fastapi import APIRouter

from pressroom.api.auth import router as auth_router
from pressroom.api.health import router as health_router
from pressroom.api.subscribers import router as subscribers_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(subscribers_router, tags=["subscribers"])
