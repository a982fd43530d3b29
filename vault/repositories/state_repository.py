"""System state repository: pause flag, settings and aggregate counters."""

import sqlite3

from common.logging_config import get_logger
from vault.types import Settings, SystemStats

logger = get_logger(__name__)

SETTING_COLUMNS = frozenset({
    "storage_fee",
    "verification_threshold",
    "default_quota",
    "max_quota",
})

STAT_COLUMNS = frozenset({
    "total_users",
    "total_files",
    "total_verified_files",
    "total_uploads",
    "total_downloads",
})


class StateRepository:
    @staticmethod
    def _fetch(conn: sqlite3.Connection) -> sqlite3.Row:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM system_state WHERE id = 1")
        row = cursor.fetchone()
        if row is None:
            raise sqlite3.OperationalError("system_state row missing; database not initialized")
        return row

    @staticmethod
    def get_settings(conn: sqlite3.Connection) -> Settings:
        row = StateRepository._fetch(conn)
        return Settings(
            paused=bool(row["paused"]),
            storage_fee=row["storage_fee"],
            verification_threshold=row["verification_threshold"],
            default_quota=row["default_quota"],
            max_quota=row["max_quota"],
            fees_collected=row["fees_collected"],
        )

    @staticmethod
    def get_stats(conn: sqlite3.Connection) -> SystemStats:
        row = StateRepository._fetch(conn)
        return SystemStats(
            total_users=row["total_users"],
            total_files=row["total_files"],
            total_verified_files=row["total_verified_files"],
            total_uploads=row["total_uploads"],
            total_downloads=row["total_downloads"],
        )

    @staticmethod
    def is_paused(conn: sqlite3.Connection) -> bool:
        return bool(StateRepository._fetch(conn)["paused"])

    @staticmethod
    def set_paused(paused: bool, conn: sqlite3.Connection) -> None:
        conn.execute("UPDATE system_state SET paused = ? WHERE id = 1", (1 if paused else 0,))

    @staticmethod
    def update_setting(column: str, value: int, conn: sqlite3.Connection) -> None:
        if column not in SETTING_COLUMNS:
            raise ValueError(f"Unknown setting: {column}")
        logger.debug(f"Updating setting {column}={value}")
        conn.execute(f"UPDATE system_state SET {column} = ? WHERE id = 1", (value,))

    @staticmethod
    def add_fees_collected(amount: int, conn: sqlite3.Connection) -> None:
        conn.execute(
            "UPDATE system_state SET fees_collected = fees_collected + ? WHERE id = 1",
            (amount,)
        )

    @staticmethod
    def increment_stats(conn: sqlite3.Connection, **deltas: int) -> None:
        """
        Add non-negative deltas to the aggregate counters.
        """
        if not deltas:
            return

        for column, delta in deltas.items():
            if column not in STAT_COLUMNS:
                raise ValueError(f"Unknown statistic: {column}")
            if delta < 0:
                raise ValueError(f"Statistics never decrease: {column} {delta}")

        assignments = ", ".join(f"{column} = {column} + ?" for column in deltas)
        conn.execute(
            f"UPDATE system_state SET {assignments} WHERE id = 1",
            tuple(deltas.values())
        )
