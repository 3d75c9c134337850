"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Health and the auth router are mounted openly; the protected
routes inside the auth router (logout, current-user) declare
get_current_company themselves because they need the resolved company.
"""

from fastapi import APIRouter

from tenantauth.api.auth import router as auth_router
from tenantauth.api.health import router as health_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
