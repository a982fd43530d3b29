"""Authentication and security utilities."""

import uuid
from typing import Optional

import bcrypt
from fastapi import Header

from common.constants import API_KEY_PREFIX
from vault.exceptions import InvalidAPIKeyError


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.
    """
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


def generate_api_key() -> str:
    """
    Generate a new API Key with the configured prefix.

    Returns:
        API Key string in format: {prefix}{uuid4}
    """
    return f"{API_KEY_PREFIX}{uuid.uuid4()}"


async def get_current_identity(authorization: Optional[str] = Header(None)) -> str:
    """
    FastAPI dependency resolving the caller identity from a Bearer API Key.

    Raises:
        InvalidAPIKeyError: If the header is missing, malformed or the key is unknown
    """
    from vault.service_locator import get_auth_service

    if not authorization or not authorization.startswith("Bearer "):
        raise InvalidAPIKeyError("Missing or malformed Authorization header")

    api_key = authorization[len("Bearer "):].strip()
    if not api_key.startswith(API_KEY_PREFIX):
        raise InvalidAPIKeyError("Invalid API Key")

    identity = get_auth_service().validate_api_key(api_key)
    if identity is None:
        raise InvalidAPIKeyError("Invalid API Key")

    return identity
