"""Shared plumbing for the registries: admin gating and transaction scoping."""

import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional

from common.logging_config import get_logger
from vault.database import transaction
from vault.exceptions import InvalidParameterError, NotAdminError

logger = get_logger(__name__)


def require_identity(identity: str, field_name: str = "identity") -> str:
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidParameterError(f"{field_name} must be a non-empty string")
    return identity


def require_int(value, field_name: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(f"{field_name} must be an integer")
    if value < minimum:
        raise InvalidParameterError(f"{field_name} must be >= {minimum}")
    return value


class Registry:
    """
    Base for the registries.

    Every operation takes an optional ``conn``. When given, the operation
    joins that transaction and leaves commit/rollback to the caller; when
    omitted it runs in a transaction of its own.
    """

    def __init__(self, admin: str, db_path: Optional[str] = None):
        self.admin = require_identity(admin, "admin")
        self.db_path = db_path

    @contextmanager
    def _unit_of_work(self, conn: Optional[sqlite3.Connection]) -> Generator[sqlite3.Connection, None, None]:
        if conn is not None:
            yield conn
            return
        with transaction(self.db_path) as own_conn:
            yield own_conn

    def is_admin(self, identity: str) -> bool:
        return identity == self.admin

    def _require_admin(self, caller: str, operation: str) -> None:
        if not self.is_admin(caller):
            logger.warning(f"Rejected admin operation {operation} [caller={caller}]")
            raise NotAdminError(f"Only the administrator may {operation}")
