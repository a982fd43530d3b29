"""Gateway: the single entry point sequencing the access, file and proof registries."""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Generator, List, Optional, Sequence, Union

from common.logging_config import get_logger
from common.types import Direction
from vault import config
from vault.database import transaction
from vault.exceptions import NotAdminError, SystemPausedError
from vault.repositories.state_repository import StateRepository
from vault.services.access_registry import AccessRegistry
from vault.services.base import require_identity
from vault.services.file_registry import FileRegistry
from vault.services.proof_verifier import ProofVerifier
from vault.types import (
    FileRecord,
    FileView,
    Settings,
    SystemStats,
    UploadReceipt,
    UserProfile,
    VerificationOutcome,
)

logger = get_logger(__name__)


class Gateway:
    """
    Owns the pause switch and the aggregate statistics.

    Every mutating operation holds the writer lock and runs in one
    transaction: the pause check, the registry calls and the statistics
    update commit together or not at all. Reads open their own connection
    and are served in both Active and Paused states.
    """

    def __init__(self, admin: str, db_path: Optional[str] = None):
        self.admin = require_identity(admin, "admin")
        self.db_path = db_path or config.DATABASE_PATH
        self.access = AccessRegistry(self.admin, self.db_path)
        self.files = FileRegistry(self.admin, self.access, self.db_path)
        self.proofs = ProofVerifier(self.admin, self.db_path)
        self.state_repo = StateRepository()
        self._write_lock = threading.RLock()

    @contextmanager
    def _mutation(self, operation: str) -> Generator[sqlite3.Connection, None, None]:
        with self._write_lock:
            with transaction(self.db_path) as conn:
                if self.state_repo.is_paused(conn):
                    logger.warning(f"Rejected {operation}: system paused")
                    raise SystemPausedError(f"System is paused; {operation} is unavailable")
                yield conn

    @contextmanager
    def _admin_mutation(self, caller: str, operation: str) -> Generator[sqlite3.Connection, None, None]:
        if caller != self.admin:
            logger.warning(f"Rejected admin operation {operation} [caller={caller}]")
            raise NotAdminError(f"Only the administrator may {operation}")
        with self._write_lock:
            with transaction(self.db_path) as conn:
                yield conn

    @contextmanager
    def _read(self) -> Generator[sqlite3.Connection, None, None]:
        with transaction(self.db_path) as conn:
            yield conn

    def register_user(self, identity: str, name: str) -> UserProfile:
        with self._mutation("registration") as conn:
            profile = self.access.register(identity, name, conn)
            self.state_repo.increment_stats(conn, total_users=1)
        return profile

    def upload_file(
        self,
        identity: str,
        file_hash: str,
        filename: str,
        size: int,
        merkle_root: str,
        fee_paid: int,
    ) -> UploadReceipt:
        with self._mutation("upload") as conn:
            receipt = self.files.upload(identity, file_hash, filename, size, merkle_root, fee_paid, conn)
            self.state_repo.increment_stats(conn, total_files=1, total_uploads=1)
        return receipt

    def _view(self, record: FileRecord, conn: sqlite3.Connection) -> FileView:
        return FileView(record, self.state_repo.get_settings(conn).verification_threshold)

    def download_file(self, identity: str, file_hash: str) -> FileView:
        with self._mutation("download") as conn:
            record = self.files.download(identity, file_hash, conn)
            self.state_repo.increment_stats(conn, total_downloads=1)
            return self._view(record, conn)

    def verify_file_proof(
        self,
        file_hash: str,
        claimed_root: str,
        proof_path: Sequence[str],
        directions: Sequence[Union[Direction, str]],
        leaf_hash: str,
    ) -> VerificationOutcome:
        with self._mutation("proof verification") as conn:
            outcome = self.proofs.verify(file_hash, claimed_root, leaf_hash, proof_path, directions, conn)
            if outcome.newly_verified:
                self.state_repo.increment_stats(conn, total_verified_files=1)
        return outcome

    def authorize_user(self, identity: str, file_hash: str, grantee: str) -> FileView:
        with self._mutation("authorization") as conn:
            return self._view(self.files.authorize(identity, file_hash, grantee, conn), conn)

    def revoke_user(self, identity: str, file_hash: str, grantee: str) -> FileView:
        with self._mutation("revocation") as conn:
            return self._view(self.files.revoke(identity, file_hash, grantee, conn), conn)

    def pause(self, caller: str) -> None:
        """Enter the Paused state. Pausing while paused is a no-op."""
        with self._admin_mutation(caller, "pause the system") as conn:
            already = self.state_repo.is_paused(conn)
            self.state_repo.set_paused(True, conn)
        if not already:
            logger.info("System paused")

    def unpause(self, caller: str) -> None:
        """Return to the Active state. Unpausing while active is a no-op."""
        with self._admin_mutation(caller, "unpause the system") as conn:
            was_paused = self.state_repo.is_paused(conn)
            self.state_repo.set_paused(False, conn)
        if was_paused:
            logger.info("System unpaused")

    def set_storage_fee(self, caller: str, fee: int) -> None:
        with self._admin_mutation(caller, "set the storage fee") as conn:
            self.files.set_storage_fee(caller, fee, conn)

    def set_verification_threshold(self, caller: str, threshold: int) -> None:
        with self._admin_mutation(caller, "set the verification threshold") as conn:
            self.proofs.set_verification_threshold(caller, threshold, conn)

    def set_default_quota(self, caller: str, quota: int) -> None:
        with self._admin_mutation(caller, "set the default quota") as conn:
            self.access.set_default_quota(caller, quota, conn)

    def set_max_quota(self, caller: str, quota: int) -> None:
        with self._admin_mutation(caller, "set the max quota") as conn:
            self.access.set_max_quota(caller, quota, conn)

    def set_user_quota(self, caller: str, identity: str, quota: int) -> UserProfile:
        with self._admin_mutation(caller, "set a user quota") as conn:
            return self.access.set_user_quota(caller, identity, quota, conn)

    def suspend_user(self, caller: str, identity: str) -> None:
        with self._admin_mutation(caller, "suspend users") as conn:
            self.access.suspend(caller, identity, conn)

    def unsuspend_user(self, caller: str, identity: str) -> None:
        with self._admin_mutation(caller, "unsuspend users") as conn:
            self.access.unsuspend(caller, identity, conn)

    def get_system_stats(self) -> SystemStats:
        with self._read() as conn:
            return self.state_repo.get_stats(conn)

    def get_settings(self) -> Settings:
        with self._read() as conn:
            return self.state_repo.get_settings(conn)

    def is_paused(self) -> bool:
        with self._read() as conn:
            return self.state_repo.is_paused(conn)

    def get_profile(self, identity: str) -> UserProfile:
        with self._read() as conn:
            return self.access.get_profile(identity, conn)

    def get_file(self, file_hash: str) -> FileView:
        with self._read() as conn:
            return self._view(self.files.get_file(file_hash, conn), conn)

    def list_user_files(self, identity: str) -> List[FileView]:
        with self._read() as conn:
            threshold = self.state_repo.get_settings(conn).verification_threshold
            return [FileView(record, threshold) for record in self.files.list_files(identity, conn)]

    def is_verified(self, file_hash: str) -> bool:
        with self._read() as conn:
            return self.proofs.is_verified(file_hash, conn)
