"""Repository layer for data access."""

from vault.repositories.user_repository import UserRepository
from vault.repositories.file_repository import FileRepository
from vault.repositories.state_repository import StateRepository
from vault.repositories.account_repository import Account, AccountRepository

__all__ = [
    "UserRepository",
    "FileRepository",
    "StateRepository",
    "Account",
    "AccountRepository",
]
