"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from common.logging_config import get_logger
from vault import config
from vault.exceptions import StorageUnavailableError

logger = get_logger(__name__)


def init_database(db_path: Optional[str] = None) -> None:
    """
    Initialize database and create tables if they don't exist.

    The system_state row is seeded from the configured defaults only when it
    is first created.
    """
    db_path = db_path or config.DATABASE_PATH
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    with transaction(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                identity TEXT PRIMARY KEY,
                name TEXT UNIQUE NOT NULL,
                registered_at TEXT NOT NULL,
                last_activity_at TEXT NOT NULL,
                storage_used INTEGER NOT NULL DEFAULT 0,
                storage_quota INTEGER NOT NULL,
                suspended INTEGER NOT NULL DEFAULT 0
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS files (
                file_hash TEXT PRIMARY KEY,
                filename TEXT NOT NULL,
                size INTEGER NOT NULL CHECK (size > 0),
                merkle_root TEXT NOT NULL,
                owner TEXT NOT NULL,
                upload_count INTEGER NOT NULL DEFAULT 1,
                download_count INTEGER NOT NULL DEFAULT 0,
                verified_proof_count INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                first_verified_at TEXT,
                FOREIGN KEY(owner) REFERENCES users(identity)
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS file_authorizations (
                file_hash TEXT NOT NULL,
                grantee TEXT NOT NULL,
                granted_at TEXT NOT NULL,
                PRIMARY KEY(file_hash, grantee),
                FOREIGN KEY(file_hash) REFERENCES files(file_hash)
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS system_state (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                paused INTEGER NOT NULL DEFAULT 0,
                storage_fee INTEGER NOT NULL,
                verification_threshold INTEGER NOT NULL,
                default_quota INTEGER NOT NULL,
                max_quota INTEGER NOT NULL,
                fees_collected INTEGER NOT NULL DEFAULT 0,
                total_users INTEGER NOT NULL DEFAULT 0,
                total_files INTEGER NOT NULL DEFAULT 0,
                total_verified_files INTEGER NOT NULL DEFAULT 0,
                total_uploads INTEGER NOT NULL DEFAULT 0,
                total_downloads INTEGER NOT NULL DEFAULT 0
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS accounts (
                identity TEXT PRIMARY KEY,
                password_hash TEXT NOT NULL,
                api_key TEXT UNIQUE,
                created_at TEXT NOT NULL,
                key_updated_at TEXT
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_files_owner ON files(owner)
        """)

        cursor.execute(
            """
            INSERT OR IGNORE INTO system_state
                (id, storage_fee, verification_threshold, default_quota, max_quota)
            VALUES (1, ?, ?, ?, ?)
            """,
            (
                config.DEFAULT_STORAGE_FEE,
                config.DEFAULT_VERIFICATION_THRESHOLD,
                config.DEFAULT_USER_QUOTA,
                config.DEFAULT_MAX_QUOTA,
            )
        )

    logger.info(f"Database initialized at {db_path}")


@contextmanager
def get_db_connection(db_path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.

    Raises:
        StorageUnavailableError: If the database cannot be opened
    """
    db_path = db_path or config.DATABASE_PATH
    try:
        conn = sqlite3.connect(db_path, timeout=config.SQLITE_BUSY_TIMEOUT)
    except sqlite3.Error as e:
        logger.error(f"Cannot open database {db_path}: {e}")
        raise StorageUnavailableError(f"Storage unavailable: {e}") from e

    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(db_path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """
    Run a unit of work in one transaction.

    Commits when the block exits normally, rolls back on any exception.
    Database failures other than constraint violations surface as
    StorageUnavailableError.
    """
    with get_db_connection(db_path) as conn:
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Database error, transaction rolled back: {e}", exc_info=True)
            raise StorageUnavailableError(f"Storage unavailable: {e}") from e
        except Exception:
            conn.rollback()
            raise

