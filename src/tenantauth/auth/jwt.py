"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Access token: short-lived (15min), proves identity on every request
- Refresh token: long-lived (10 days), stored on the company record

Each kind has its own signing secret, so a refresh token can never pass
as an access token even before the "type" claim is checked.

TokenIssuer takes an explicit TokenConfig instead of reading settings.
The app factory builds one and parks it on app.state; routes get it via
the get_token_issuer dependency.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from tenantauth.config import Settings

ACCESS = "access"
REFRESH = "refresh"


class TokenError(Exception):
    """Raised when token creation/verification fails."""


@dataclass(frozen=True)
class TokenConfig:
    """Signing secrets and lifetimes for both token kinds."""

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        return cls(
            access_secret=settings.access_token_secret,
            refresh_secret=settings.refresh_token_secret,
            access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
            algorithm=settings.jwt_algorithm,
        )


class TokenIssuer:
    """Signs and verifies access/refresh tokens for one TokenConfig."""

    def __init__(self, config: TokenConfig):
        self.config = config

    @property
    def access_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self.config.access_ttl.total_seconds())

    @property
    def refresh_expires_in(self) -> int:
        return int(self.config.refresh_ttl.total_seconds())

    def create_access_token(
        self,
        company_id: str,
        owner_email: str,
        roll_no: str,
        owner_name: str,
    ) -> str:
        """Create a JWT access token carrying the owner's identity claims."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": company_id,
            "ownerEmail": owner_email,
            "rollNo": roll_no,
            "ownerName": owner_name,
            "type": ACCESS,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self.config.access_ttl,
        }
        return jwt.encode(
            payload, self.config.access_secret, algorithm=self.config.algorithm
        )

    def create_refresh_token(self, company_id: str) -> str:
        """Create a JWT refresh token. Only the company id is embedded."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": company_id,
            "type": REFRESH,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self.config.refresh_ttl,
        }
        return jwt.encode(
            payload, self.config.refresh_secret, algorithm=self.config.algorithm
        )

    def verify_access_token(self, token: str) -> dict:
        return self._verify(token, self.config.access_secret, ACCESS)

    def verify_refresh_token(self, token: str) -> dict:
        return self._verify(token, self.config.refresh_secret, REFRESH)

    def _verify(self, token: str, secret: str, expected_type: str) -> dict:
        """Verify and decode a JWT token.

        Returns the payload dict on success.
        Raises TokenError on failure.
        """
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")

        if payload.get("type") != expected_type:
            raise TokenError(f"Wrong token type, expected {expected_type}")
        return payload
