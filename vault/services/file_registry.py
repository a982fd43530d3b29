"""File registry: metadata lifecycle, fee and quota gated uploads, authorization gated downloads."""

import sqlite3
from typing import List, Optional, Protocol

from common.logging_config import get_logger
from vault.exceptions import (
    DuplicateHashError,
    FileNotFoundError,
    InsufficientFeeError,
    InvalidParameterError,
    NotAuthorizedError,
    NotEligibleError,
    NotOwnerOrAdminError,
)
from vault.repositories.file_repository import FileRepository
from vault.repositories.state_repository import StateRepository
from vault.services.base import Registry, require_identity, require_int
from vault.types import FileRecord, UploadReceipt
from vault.utils import normalize_hash, utc_now

logger = get_logger(__name__)


class AccessPolicy(Protocol):
    """The slice of the access registry that uploads and downloads consult."""

    def is_eligible(self, identity: str, conn: Optional[sqlite3.Connection] = None) -> bool: ...

    def charge_quota(self, identity: str, size: int, conn: Optional[sqlite3.Connection] = None): ...

    def touch(self, identity: str, conn: Optional[sqlite3.Connection] = None) -> None: ...


class FileRegistry(Registry):
    def __init__(self, admin: str, access: AccessPolicy, db_path: Optional[str] = None):
        super().__init__(admin, db_path)
        self.access = access
        self.file_repo = FileRepository()
        self.state_repo = StateRepository()

    def upload(
        self,
        owner: str,
        file_hash: str,
        filename: str,
        size: int,
        merkle_root: str,
        fee_paid: int,
        conn: Optional[sqlite3.Connection] = None,
    ) -> UploadReceipt:
        """
        Record a new file for owner.

        Checks run in order: eligibility, fee, duplicate hash, quota. The
        quota charge and the record insert share one transaction, so a
        failure after charging leaves no trace.

        Raises:
            NotEligibleError: owner unregistered or suspended
            InsufficientFeeError: fee_paid below the storage fee
            DuplicateHashError: a record with file_hash exists
            QuotaExceededError: size does not fit in the owner's quota
        """
        require_identity(owner, "owner")
        file_hash = normalize_hash(file_hash, "file_hash")
        merkle_root = normalize_hash(merkle_root, "merkle_root")
        if not isinstance(filename, str) or not filename.strip():
            raise InvalidParameterError("filename must be a non-empty string")
        require_int(size, "size", minimum=1)
        require_int(fee_paid, "fee_paid")

        with self._unit_of_work(conn) as conn:
            if not self.access.is_eligible(owner, conn):
                logger.warning(f"Upload rejected: owner not eligible [owner={owner}]")
                raise NotEligibleError(f"Identity '{owner}' is not registered or is suspended")

            settings = self.state_repo.get_settings(conn)
            storage_fee = settings.storage_fee
            if fee_paid < storage_fee:
                logger.warning(f"Upload rejected: fee {fee_paid} below {storage_fee} [owner={owner}]")
                raise InsufficientFeeError(f"Storage fee is {storage_fee}, received {fee_paid}")

            if self.file_repo.exists(file_hash, conn):
                raise DuplicateHashError(f"File {file_hash} is already registered")

            self.access.charge_quota(owner, size, conn)

            record = self.file_repo.create_file(
                file_hash=file_hash,
                filename=filename,
                size=size,
                merkle_root=merkle_root,
                owner=owner,
                created_at=utc_now(),
                conn=conn,
            )
            self.state_repo.add_fees_collected(storage_fee, conn)
            self.access.touch(owner, conn)

        refund = fee_paid - storage_fee
        logger.info(f"Uploaded {filename} [file_hash={file_hash}] [owner={owner}] size={size} refund={refund}")
        return UploadReceipt(
            record=record,
            fee_charged=storage_fee,
            refund=refund,
            threshold=settings.verification_threshold,
        )

    def download(self, requester: str, file_hash: str, conn: Optional[sqlite3.Connection] = None) -> FileRecord:
        """
        Record a download by an authorized requester.

        Authorized means owner, member of the authorized set, or admin.
        """
        require_identity(requester, "requester")
        file_hash = normalize_hash(file_hash, "file_hash")

        with self._unit_of_work(conn) as conn:
            record = self._get_record(file_hash, conn)

            if requester not in record.authorized and requester != record.owner and not self.is_admin(requester):
                logger.warning(f"Download rejected [file_hash={file_hash}] [requester={requester}]")
                raise NotAuthorizedError(f"Identity '{requester}' may not download {file_hash}")

            self.file_repo.increment_download_count(file_hash, conn)
            self.access.touch(requester, conn)
            record = self._get_record(file_hash, conn)

        logger.info(f"Download recorded [file_hash={file_hash}] [requester={requester}]")
        return record

    def authorize(
        self,
        caller: str,
        file_hash: str,
        grantee: str,
        conn: Optional[sqlite3.Connection] = None,
    ) -> FileRecord:
        """Grant download rights; granting an existing grantee is a no-op."""
        require_identity(grantee, "grantee")
        file_hash = normalize_hash(file_hash, "file_hash")

        with self._unit_of_work(conn) as conn:
            record = self._get_record(file_hash, conn)
            self._require_owner_or_admin(caller, record)
            self.file_repo.add_authorization(file_hash, grantee, utc_now(), conn)
            record = self._get_record(file_hash, conn)

        logger.info(f"Authorized [grantee={grantee}] on [file_hash={file_hash}] by [caller={caller}]")
        return record

    def revoke(
        self,
        caller: str,
        file_hash: str,
        grantee: str,
        conn: Optional[sqlite3.Connection] = None,
    ) -> FileRecord:
        """Withdraw download rights; the owner always keeps them."""
        require_identity(grantee, "grantee")
        file_hash = normalize_hash(file_hash, "file_hash")

        with self._unit_of_work(conn) as conn:
            record = self._get_record(file_hash, conn)
            self._require_owner_or_admin(caller, record)
            if grantee == record.owner:
                raise InvalidParameterError("The owner's access cannot be revoked")
            self.file_repo.remove_authorization(file_hash, grantee, conn)
            record = self._get_record(file_hash, conn)

        logger.info(f"Revoked [grantee={grantee}] on [file_hash={file_hash}] by [caller={caller}]")
        return record

    def set_storage_fee(self, caller: str, fee: int, conn: Optional[sqlite3.Connection] = None) -> None:
        self._require_admin(caller, "set the storage fee")
        require_int(fee, "storage_fee")
        with self._unit_of_work(conn) as conn:
            self.state_repo.update_setting("storage_fee", fee, conn)
        logger.info(f"Storage fee set to {fee}")

    def get_file(self, file_hash: str, conn: Optional[sqlite3.Connection] = None) -> FileRecord:
        file_hash = normalize_hash(file_hash, "file_hash")
        with self._unit_of_work(conn) as conn:
            return self._get_record(file_hash, conn)

    def list_files(self, owner: str, conn: Optional[sqlite3.Connection] = None) -> List[FileRecord]:
        with self._unit_of_work(conn) as conn:
            return self.file_repo.list_by_owner(owner, conn)

    def _get_record(self, file_hash: str, conn: sqlite3.Connection) -> FileRecord:
        record = self.file_repo.get_by_hash(file_hash, conn)
        if record is None:
            raise FileNotFoundError(f"File {file_hash} not found")
        return record

    def _require_owner_or_admin(self, caller: str, record: FileRecord) -> None:
        if caller != record.owner and not self.is_admin(caller):
            logger.warning(f"Rejected authorization change [file_hash={record.file_hash}] [caller={caller}]")
            raise NotOwnerOrAdminError("Only the file owner or the administrator can change authorizations")
