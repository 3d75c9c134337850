"""Auth API — company registration, login, logout, current identity.

Learn: Routes for the company credential lifecycle:
- POST /register → create a company, return clientID + clientSecret (once!)
- POST /login → email + access code + client credentials → JWT tokens + cookies
- POST /logout → forget the refresh token, clear cookies
- GET /current-user → the company behind the access token

Every response is wrapped in the ApiResponse envelope.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tenantauth.auth.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_current_company,
    get_token_issuer,
)
from tenantauth.auth.jwt import TokenIssuer
from tenantauth.config import settings
from tenantauth.db.engine import get_db
from tenantauth.db.models import Company
from tenantauth.schemas.company import (
    CompanyRead,
    LoginRequest,
    LoginResult,
    RegisterRequest,
    RegisteredCompany,
)
from tenantauth.schemas.envelope import envelope
from tenantauth.services.company_service import (
    CompanyExistsError,
    CompanyNotFoundError,
    CompanyService,
    InvalidCredentialsError,
    TokenIssueError,
)

router = APIRouter()


def _cookie_options() -> dict:
    return {"httponly": True, "secure": settings.cookie_secure, "samesite": "lax"}


# ─── Register ────────────────────────────────────────────


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a company. The client secret is only returned here."""
    try:
        registration = await CompanyService(db).register(body)
    except CompanyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))

    company = registration.company
    data = RegisteredCompany(
        company_name=company.company_name,
        owner_name=company.owner_name,
        roll_no=company.roll_no,
        owner_email=company.owner_email,
        client_id=company.client_id,
        client_secret=registration.client_secret,
    )
    return JSONResponse(
        status_code=201,
        content=envelope(
            201,
            data,
            "Company registered successfully. Don't forget to save your credentials!",
        ),
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """Verify credentials, issue tokens, and set them as cookies."""
    service = CompanyService(
        db, tokens=tokens, enforce_client_secret=settings.enforce_client_secret
    )
    try:
        issued = await service.login(body)
    except CompanyNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except TokenIssueError as e:
        raise HTTPException(status_code=500, detail=str(e))

    data = LoginResult(
        access_token=issued.access_token,
        expires_in=tokens.access_expires_in,
    )
    response = JSONResponse(
        status_code=200,
        content=envelope(200, data, "Company logged in successfully"),
    )
    options = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE, issued.access_token, max_age=tokens.access_expires_in, **options
    )
    response.set_cookie(
        REFRESH_COOKIE, issued.refresh_token, max_age=tokens.refresh_expires_in, **options
    )
    return response


# ─── Logout ──────────────────────────────────────────────


@router.post("/logout")
async def logout(
    company: Company = Depends(get_current_company),
    db: AsyncSession = Depends(get_db),
):
    """Clear the stored refresh token and both cookies."""
    await CompanyService(db).logout(company)

    response = JSONResponse(
        status_code=200,
        content=envelope(200, {}, "Company logged out"),
    )
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response


# ─── Current company ─────────────────────────────────────


@router.get("/current-user")
async def current_user(company: Company = Depends(get_current_company)):
    """Echo the company resolved from the access token."""
    return envelope(
        200, CompanyRead.model_validate(company), "Company fetched successfully"
    )
