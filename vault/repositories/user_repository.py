"""User profile repository for database operations."""

import sqlite3
from datetime import datetime
from typing import Optional

from common.logging_config import get_logger
from vault.types import UserProfile
from vault.utils import parse_timestamp

logger = get_logger(__name__)

_PROFILE_COLUMNS = """identity, name, registered_at, last_activity_at,
                      storage_used, storage_quota, suspended"""


def _row_to_profile(row: sqlite3.Row) -> UserProfile:
    return UserProfile(
        identity=row["identity"],
        name=row["name"],
        registered_at=parse_timestamp(row["registered_at"]),
        last_activity_at=parse_timestamp(row["last_activity_at"]),
        storage_used=row["storage_used"],
        storage_quota=row["storage_quota"],
        suspended=bool(row["suspended"]),
    )


class UserRepository:
    @staticmethod
    def create_user(
        identity: str,
        name: str,
        storage_quota: int,
        registered_at: datetime,
        conn: sqlite3.Connection,
    ) -> UserProfile:
        logger.debug(f"Creating user profile: {name} [identity={identity}]")
        cursor = conn.cursor()
        cursor.execute(
            """
            INSERT INTO users (identity, name, registered_at, last_activity_at,
                               storage_used, storage_quota, suspended)
            VALUES (?, ?, ?, ?, 0, ?, 0)
            """,
            (identity, name, registered_at.isoformat(), registered_at.isoformat(), storage_quota)
        )

        return UserProfile(
            identity=identity,
            name=name,
            registered_at=registered_at,
            last_activity_at=registered_at,
            storage_used=0,
            storage_quota=storage_quota,
            suspended=False,
        )

    @staticmethod
    def get_by_identity(identity: str, conn: sqlite3.Connection) -> Optional[UserProfile]:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_PROFILE_COLUMNS} FROM users WHERE identity = ?", (identity,))
        row = cursor.fetchone()

        if row is None:
            logger.debug(f"User not found [identity={identity}]")
            return None

        return _row_to_profile(row)

    @staticmethod
    def get_by_name(name: str, conn: sqlite3.Connection) -> Optional[UserProfile]:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_PROFILE_COLUMNS} FROM users WHERE name = ?", (name,))
        row = cursor.fetchone()
        return _row_to_profile(row) if row else None

    @staticmethod
    def update_storage_used(identity: str, storage_used: int, conn: sqlite3.Connection) -> None:
        conn.execute(
            "UPDATE users SET storage_used = ? WHERE identity = ?",
            (storage_used, identity)
        )

    @staticmethod
    def update_quota(identity: str, storage_quota: int, conn: sqlite3.Connection) -> None:
        conn.execute(
            "UPDATE users SET storage_quota = ? WHERE identity = ?",
            (storage_quota, identity)
        )

    @staticmethod
    def set_suspended(identity: str, suspended: bool, conn: sqlite3.Connection) -> None:
        conn.execute(
            "UPDATE users SET suspended = ? WHERE identity = ?",
            (1 if suspended else 0, identity)
        )

    @staticmethod
    def touch(identity: str, at: datetime, conn: sqlite3.Connection) -> None:
        conn.execute(
            "UPDATE users SET last_activity_at = ? WHERE identity = ?",
            (at.isoformat(), identity)
        )
