"""Account credential repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from common.logging_config import get_logger
from vault.database import get_db_connection
from vault.utils import parse_timestamp

logger = get_logger(__name__)


@dataclass
class Account:
    identity: str
    password_hash: str
    api_key: Optional[str]
    created_at: datetime
    key_updated_at: Optional[datetime]


def _row_to_account(row) -> Account:
    return Account(
        identity=row["identity"],
        password_hash=row["password_hash"],
        api_key=row["api_key"],
        created_at=parse_timestamp(row["created_at"]),
        key_updated_at=parse_timestamp(row["key_updated_at"]),
    )


class AccountRepository:
    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def create_account(
        self,
        identity: str,
        password_hash: str,
        api_key: Optional[str],
        created_at: datetime,
    ) -> Account:
        logger.debug(f"Creating account [identity={identity}]")
        with get_db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO accounts (identity, password_hash, api_key, created_at, key_updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (identity, password_hash, api_key, created_at.isoformat(), created_at.isoformat())
                )
                conn.commit()
                logger.info(f"Account created [identity={identity}]")
            except Exception as e:
                logger.error(f"Failed to create account {identity}: {e}")
                raise

        return Account(
            identity=identity,
            password_hash=password_hash,
            api_key=api_key,
            created_at=created_at,
            key_updated_at=created_at,
        )

    def get_by_identity(self, identity: str) -> Optional[Account]:
        with get_db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """SELECT identity, password_hash, api_key, created_at, key_updated_at
                   FROM accounts WHERE identity = ?""",
                (identity,)
            )
            row = cursor.fetchone()
            return _row_to_account(row) if row else None

    def get_by_api_key(self, api_key: str) -> Optional[Account]:
        logger.debug("Fetching account by API key")
        with get_db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """SELECT identity, password_hash, api_key, created_at, key_updated_at
                   FROM accounts WHERE api_key = ?""",
                (api_key,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug("Account not found for provided API key")
                return None

            return _row_to_account(row)

    def update_api_key(self, identity: str, new_api_key: str, updated_at: datetime) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                "UPDATE accounts SET api_key = ?, key_updated_at = ? WHERE identity = ?",
                (new_api_key, updated_at.isoformat(), identity)
            )
            conn.commit()
            logger.info(f"API key rotated [identity={identity}]")

    def update_password(self, identity: str, password_hash: str) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                "UPDATE accounts SET password_hash = ? WHERE identity = ?",
                (password_hash, identity)
            )
            conn.commit()
            logger.info(f"Password updated [identity={identity}]")
