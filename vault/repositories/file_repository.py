"""File record repository for database operations."""

import sqlite3
from datetime import datetime
from typing import FrozenSet, List, Optional

from common.logging_config import get_logger
from vault.types import FileRecord
from vault.utils import parse_timestamp

logger = get_logger(__name__)

_FILE_COLUMNS = """file_hash, filename, size, merkle_root, owner, upload_count,
                   download_count, verified_proof_count, created_at, first_verified_at"""


class FileRepository:
    @staticmethod
    def create_file(
        file_hash: str,
        filename: str,
        size: int,
        merkle_root: str,
        owner: str,
        created_at: datetime,
        conn: sqlite3.Connection,
    ) -> FileRecord:
        logger.debug(f"Creating file record [file_hash={file_hash}] [owner={owner}]")
        cursor = conn.cursor()
        cursor.execute(
            """
            INSERT INTO files (file_hash, filename, size, merkle_root, owner, upload_count,
                               download_count, verified_proof_count, created_at)
            VALUES (?, ?, ?, ?, ?, 1, 0, 0, ?)
            """,
            (file_hash, filename, size, merkle_root, owner, created_at.isoformat())
        )
        FileRepository.add_authorization(file_hash, owner, created_at, conn)

        return FileRecord(
            file_hash=file_hash,
            filename=filename,
            size=size,
            merkle_root=merkle_root,
            owner=owner,
            authorized=frozenset({owner}),
            upload_count=1,
            download_count=0,
            verified_proof_count=0,
            created_at=created_at,
        )

    @staticmethod
    def get_by_hash(file_hash: str, conn: sqlite3.Connection) -> Optional[FileRecord]:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_FILE_COLUMNS} FROM files WHERE file_hash = ?", (file_hash,))
        row = cursor.fetchone()

        if row is None:
            logger.debug(f"File not found [file_hash={file_hash}]")
            return None

        return FileRepository._row_to_record(row, conn)

    @staticmethod
    def exists(file_hash: str, conn: sqlite3.Connection) -> bool:
        cursor = conn.cursor()
        cursor.execute("SELECT 1 FROM files WHERE file_hash = ?", (file_hash,))
        return cursor.fetchone() is not None

    @staticmethod
    def list_by_owner(owner: str, conn: sqlite3.Connection) -> List[FileRecord]:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {_FILE_COLUMNS} FROM files WHERE owner = ? ORDER BY created_at, file_hash",
            (owner,)
        )
        return [FileRepository._row_to_record(row, conn) for row in cursor.fetchall()]

    @staticmethod
    def increment_download_count(file_hash: str, conn: sqlite3.Connection) -> None:
        conn.execute(
            "UPDATE files SET download_count = download_count + 1 WHERE file_hash = ?",
            (file_hash,)
        )

    @staticmethod
    def increment_verified_count(file_hash: str, conn: sqlite3.Connection) -> int:
        """
        Add one accepted proof and return the new count.
        """
        conn.execute(
            "UPDATE files SET verified_proof_count = verified_proof_count + 1 WHERE file_hash = ?",
            (file_hash,)
        )
        cursor = conn.cursor()
        cursor.execute("SELECT verified_proof_count FROM files WHERE file_hash = ?", (file_hash,))
        return cursor.fetchone()["verified_proof_count"]

    @staticmethod
    def mark_first_verified(file_hash: str, at: datetime, conn: sqlite3.Connection) -> None:
        conn.execute(
            "UPDATE files SET first_verified_at = ? WHERE file_hash = ? AND first_verified_at IS NULL",
            (at.isoformat(), file_hash)
        )

    @staticmethod
    def get_authorized(file_hash: str, conn: sqlite3.Connection) -> FrozenSet[str]:
        cursor = conn.cursor()
        cursor.execute("SELECT grantee FROM file_authorizations WHERE file_hash = ?", (file_hash,))
        return frozenset(row["grantee"] for row in cursor.fetchall())

    @staticmethod
    def add_authorization(file_hash: str, grantee: str, granted_at: datetime, conn: sqlite3.Connection) -> None:
        conn.execute(
            "INSERT OR IGNORE INTO file_authorizations (file_hash, grantee, granted_at) VALUES (?, ?, ?)",
            (file_hash, grantee, granted_at.isoformat())
        )

    @staticmethod
    def remove_authorization(file_hash: str, grantee: str, conn: sqlite3.Connection) -> None:
        conn.execute(
            "DELETE FROM file_authorizations WHERE file_hash = ? AND grantee = ?",
            (file_hash, grantee)
        )

    @staticmethod
    def _row_to_record(row: sqlite3.Row, conn: sqlite3.Connection) -> FileRecord:
        return FileRecord(
            file_hash=row["file_hash"],
            filename=row["filename"],
            size=row["size"],
            merkle_root=row["merkle_root"],
            owner=row["owner"],
            authorized=FileRepository.get_authorized(row["file_hash"], conn),
            upload_count=row["upload_count"],
            download_count=row["download_count"],
            verified_proof_count=row["verified_proof_count"],
            created_at=parse_timestamp(row["created_at"]),
            first_verified_at=parse_timestamp(row["first_verified_at"]),
        )
