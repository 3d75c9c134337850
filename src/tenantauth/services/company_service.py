"""Company service — registration, login, and logout business logic.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Services raise
domain exceptions; routes translate them into HTTP status codes.
This keeps the rules testable without an HTTP client.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import jwt
import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenantauth.auth.jwt import TokenIssuer
from tenantauth.auth.password import (
    digest_client_secret,
    generate_client_id,
    generate_client_secret,
    verify_access_code,
    verify_client_secret,
)
from tenantauth.db.models import Company
from tenantauth.schemas.company import LoginRequest, RegisterRequest

logger = structlog.get_logger()


class CompanyExistsError(Exception):
    """An account with this owner email is already registered."""


class CompanyNotFoundError(Exception):
    """No account matches the owner email / client ID pair."""


class InvalidCredentialsError(Exception):
    """Access code or client secret did not match."""


class TokenIssueError(Exception):
    """Tokens could not be generated or persisted."""


@dataclass
class Registration:
    company: Company
    client_secret: str  # plaintext, shown once


@dataclass
class IssuedTokens:
    company: Company
    access_token: str
    refresh_token: str


class CompanyService:
    """Business logic for company accounts."""

    def __init__(
        self,
        db: AsyncSession,
        tokens: Optional[TokenIssuer] = None,
        enforce_client_secret: bool = True,
    ):
        self.db = db
        self.tokens = tokens
        self.enforce_client_secret = enforce_client_secret

    # ─── Lookups ────────────────────────────────────────

    async def get(self, company_id: uuid.UUID) -> Optional[Company]:
        return await self.db.get(Company, company_id)

    async def get_by_email(self, owner_email: str) -> Optional[Company]:
        result = await self.db.execute(
            select(Company).where(Company.owner_email == owner_email)
        )
        return result.scalars().first()

    async def get_by_credentials(
        self, owner_email: str, client_id: str
    ) -> Optional[Company]:
        result = await self.db.execute(
            select(Company).where(
                Company.owner_email == owner_email,
                Company.client_id == client_id,
            )
        )
        return result.scalars().first()

    # ─── Register ───────────────────────────────────────

    async def register(self, body: RegisterRequest) -> Registration:
        """Create a company and mint its client credentials.

        The access code is assigned in plaintext; the model's flush hook
        hashes it before the INSERT is emitted.
        """
        if await self.get_by_email(body.owner_email):
            raise CompanyExistsError("Company with this email already exists")

        client_secret = generate_client_secret()
        company = Company(
            company_name=body.company_name,
            owner_name=body.owner_name,
            roll_no=body.roll_no,
            owner_email=body.owner_email,
            access_code=body.access_code,
            client_id=generate_client_id(),
            client_secret_hash=digest_client_secret(client_secret),
        )
        self.db.add(company)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            await self.db.rollback()
            raise CompanyExistsError("Company with this email already exists")
        await self.db.refresh(company)

        logger.info(
            "company.registered",
            company_id=str(company.id),
            client_id=company.client_id,
        )
        return Registration(company=company, client_secret=client_secret)

    # ─── Login ──────────────────────────────────────────

    async def authenticate(self, body: LoginRequest) -> Company:
        """Resolve the company for a login request or raise."""
        company = await self.get_by_credentials(body.owner_email, body.client_id)
        if company is None:
            logger.info("company.login_failed", reason="not_found")
            raise CompanyNotFoundError(
                "Company does not exist or Please Provide Valid Email or ClientId"
            )

        if not verify_access_code(body.access_code, company.access_code):
            logger.info(
                "company.login_failed", reason="access_code", company_id=str(company.id)
            )
            raise InvalidCredentialsError("Invalid access code")

        if self.enforce_client_secret and not verify_client_secret(
            body.client_secret, company.client_secret_hash
        ):
            logger.info(
                "company.login_failed", reason="client_secret", company_id=str(company.id)
            )
            raise InvalidCredentialsError("Invalid client secret")

        return company

    async def issue_tokens(self, company: Company) -> IssuedTokens:
        """Mint access + refresh tokens and store the refresh token.

        Any failure here is reported with one opaque message; the cause
        is logged, never returned to the caller.
        """
        company_id = str(company.id)
        try:
            access_token = self.tokens.create_access_token(
                company_id=company_id,
                owner_email=company.owner_email,
                roll_no=company.roll_no,
                owner_name=company.owner_name,
            )
            refresh_token = self.tokens.create_refresh_token(company_id)
            company.refresh_token = refresh_token
            await self.db.commit()
        except (SQLAlchemyError, jwt.PyJWTError) as e:
            await self.db.rollback()
            logger.error(
                "company.token_issue_failed", company_id=company_id, error=str(e)
            )
            raise TokenIssueError(
                "Something went wrong while generating refresh and access tokens"
            ) from e

        logger.info("company.logged_in", company_id=company_id)
        return IssuedTokens(
            company=company, access_token=access_token, refresh_token=refresh_token
        )

    async def login(self, body: LoginRequest) -> IssuedTokens:
        company = await self.authenticate(body)
        return await self.issue_tokens(company)

    # ─── Logout ─────────────────────────────────────────

    async def logout(self, company: Company) -> None:
        """Forget the stored refresh token."""
        company.refresh_token = None
        await self.db.commit()
        logger.info("company.logged_out", company_id=str(company.id))
