"""Pydantic schemas for company registration, login, and profile.

Learn: Pydantic v2 models validate request/response data. The wire format
is camelCase (companyName, clientID, ...) via field aliases; Python code
keeps snake_case. populate_by_name lets tests and the service layer build
models with either spelling.

Separate "Request" schemas (input) from "Read" schemas (output). CompanyRead
is the only shape a Company ever leaves the API in — it has no field for the
access code hash, the client secret digest, or the refresh token.
"""

import re
import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def _valid_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please use a valid email address.")
    return value


NonBlank = Annotated[str, AfterValidator(_not_blank)]
Email = Annotated[str, AfterValidator(_not_blank), AfterValidator(_valid_email)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ─── Requests ───────────────────────────────────────────


class RegisterRequest(_CamelModel):
    company_name: NonBlank = Field(alias="companyName", max_length=200)
    owner_name: NonBlank = Field(alias="ownerName", max_length=200)
    roll_no: NonBlank = Field(alias="rollNo", max_length=100)
    owner_email: Email = Field(alias="ownerEmail", max_length=255)
    access_code: NonBlank = Field(alias="accessCode")


class LoginRequest(_CamelModel):
    company_name: NonBlank = Field(alias="companyName")
    owner_name: NonBlank = Field(alias="ownerName")
    roll_no: NonBlank = Field(alias="rollNo")
    owner_email: NonBlank = Field(alias="ownerEmail")
    access_code: NonBlank = Field(alias="accessCode")
    client_id: NonBlank = Field(alias="clientID")
    client_secret: NonBlank = Field(alias="clientSecret")


# ─── Responses ──────────────────────────────────────────


class RegisteredCompany(_CamelModel):
    """Registration result — the only time clientSecret is ever returned."""
    company_name: str = Field(alias="companyName")
    owner_name: str = Field(alias="ownerName")
    roll_no: str = Field(alias="rollNo")
    owner_email: str = Field(alias="ownerEmail")
    client_id: str = Field(alias="clientID")
    client_secret: str = Field(alias="clientSecret")


class CompanyRead(_CamelModel):
    id: uuid.UUID
    company_name: str = Field(alias="companyName")
    owner_name: str = Field(alias="ownerName")
    roll_no: str = Field(alias="rollNo")
    owner_email: str = Field(alias="ownerEmail")
    client_id: str = Field(alias="clientID")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class LoginResult(_CamelModel):
    token_type: str = "Bearer"
    access_token: str = Field(alias="accessToken")
    expires_in: int
