"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current company from the request.

Token lookup order:
1. accessToken cookie (set by POST /login)
2. Authorization: Bearer <token> header (API clients)

A token that verifies but whose company no longer exists is rejected
just like a forged one. Failures are terminal — no retry, no fallback.
"""

import uuid
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tenantauth.auth.jwt import TokenError, TokenIssuer
from tenantauth.db.engine import get_db
from tenantauth.db.models import Company

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def get_token_issuer(request: Request) -> TokenIssuer:
    """The TokenIssuer built by the app factory."""
    return request.app.state.token_issuer


def extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_company(
    request: Request,
    tokens: TokenIssuer = Depends(get_token_issuer),
    db: AsyncSession = Depends(get_db),
) -> Company:
    """Require a valid access token. Raises HTTP 401 otherwise."""
    token = extract_token(request)
    if not token:
        raise _unauthorized("Unauthorized request")

    try:
        payload = tokens.verify_access_token(token)
    except TokenError as e:
        raise _unauthorized(str(e))

    try:
        company_id = uuid.UUID(payload["sub"])
    except (ValueError, TypeError, AttributeError):
        raise _unauthorized("Invalid Access Token")

    company = await db.get(Company, company_id)
    if company is None:
        raise _unauthorized("Invalid Access Token")

    request.state.company = company
    return company
