"""Credential hashing and generation.

Learn: Two kinds of secrets, two kinds of hashing:
- Access codes are chosen by humans (low entropy) → bcrypt, salted and slow.
- Client secrets are 256 random bits we generate → a plain SHA-256 digest
  is enough, same as an API key. Brute force over 2^256 is not a concern,
  so bcrypt's cost buys nothing there.

Neither value is ever stored or compared in plaintext.
"""

import hashlib
import secrets
import uuid
from typing import Optional

import bcrypt

from tenantauth.config import settings


def hash_access_code(access_code: str, rounds: Optional[int] = None) -> str:
    """Hash an access code with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". Input is truncated to 72 bytes
    (bcrypt's limit).
    """
    code_bytes = access_code.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(code_bytes, salt).decode("utf-8")


def verify_access_code(access_code: str, access_code_hash: str) -> bool:
    """Check an access code against its bcrypt hash."""
    try:
        code_bytes = access_code.encode("utf-8")[:72]
        return bcrypt.checkpw(code_bytes, access_code_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_client_id() -> str:
    return str(uuid.uuid4())


def generate_client_secret() -> str:
    """256-bit random secret, hex-encoded (64 chars)."""
    return secrets.token_hex(32)


def digest_client_secret(client_secret: str) -> str:
    return hashlib.sha256(client_secret.encode("utf-8")).hexdigest()


def verify_client_secret(client_secret: str, client_secret_hash: str) -> bool:
    return secrets.compare_digest(
        digest_client_secret(client_secret), client_secret_hash
    )
