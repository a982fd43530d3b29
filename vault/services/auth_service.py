"""Authentication service: account credentials and API keys."""

import sqlite3
from typing import Optional

from common.logging_config import get_logger
from vault.auth import generate_api_key, hash_password, verify_password
from vault.exceptions import (
    AccountAlreadyExistsError,
    InvalidCredentialsError,
    InvalidParameterError,
    ReservedIdentityError,
)
from vault.repositories.account_repository import AccountRepository
from vault.utils import utc_now

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    def __init__(self, db_path: Optional[str] = None, admin_identity: Optional[str] = None):
        self.account_repo = AccountRepository(db_path)
        self.admin_identity = admin_identity

    def signup(self, identity: str, password: str) -> str:
        """
        Create credentials for an identity and return its first API Key.
        """
        logger.info(f"Attempting signup [identity={identity}]")
        if not identity or not identity.strip():
            raise InvalidParameterError("identity must be a non-empty string")
        if identity == self.admin_identity:
            logger.warning(f"Signup rejected: identity '{identity}' is reserved")
            raise ReservedIdentityError(f"Identity '{identity}' is reserved for the administrator")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidParameterError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        if self.account_repo.get_by_identity(identity) is not None:
            logger.warning(f"Signup failed: identity '{identity}' already has an account")
            raise AccountAlreadyExistsError(f"Account '{identity}' already exists")

        api_key = generate_api_key()
        try:
            self.account_repo.create_account(
                identity=identity,
                password_hash=hash_password(password),
                api_key=api_key,
                created_at=utc_now(),
            )
        except sqlite3.IntegrityError:
            logger.warning(f"Signup failed due to integrity error [identity={identity}]")
            raise AccountAlreadyExistsError(f"Account '{identity}' already exists")

        logger.info(f"Signup successful [identity={identity}]")
        return api_key

    def provision_admin(self, password: str) -> None:
        """
        Create the administrator account, or reset its password if it exists.

        The existing API Key, if any, stays valid.
        """
        if self.admin_identity is None:
            raise InvalidParameterError("No administrator identity configured")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidParameterError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        password_hash = hash_password(password)
        if self.account_repo.get_by_identity(self.admin_identity) is None:
            self.account_repo.create_account(
                identity=self.admin_identity,
                password_hash=password_hash,
                api_key=None,
                created_at=utc_now(),
            )
        else:
            self.account_repo.update_password(self.admin_identity, password_hash)
        logger.info(f"Administrator credential provisioned [identity={self.admin_identity}]")

    def login(self, identity: str, password: str) -> str:
        """
        Check credentials and rotate the API Key.
        """
        logger.info(f"Login attempt [identity={identity}]")
        account = self.account_repo.get_by_identity(identity)
        if account is None or not verify_password(password, account.password_hash):
            logger.warning(f"Login failed [identity={identity}]")
            raise InvalidCredentialsError("Invalid identity or password")

        new_api_key = generate_api_key()
        self.account_repo.update_api_key(identity, new_api_key, utc_now())
        logger.info(f"Login successful [identity={identity}]")
        return new_api_key

    def validate_api_key(self, api_key: str) -> Optional[str]:
        account = self.account_repo.get_by_api_key(api_key)
        if account is None:
            logger.warning("API key validation failed: unknown key")
            return None
        return account.identity
