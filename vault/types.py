"""Vault domain data type definitions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class UserProfile:
    """
    Registered identity with its storage accounting.
    """
    identity: str
    name: str
    registered_at: datetime
    last_activity_at: datetime
    storage_used: int
    storage_quota: int
    suspended: bool

    @property
    def storage_available(self) -> int:
        return self.storage_quota - self.storage_used


@dataclass(frozen=True)
class FileRecord:
    """
    Metadata for one stored file, keyed by its content hash.

    ``authorized`` always contains the owner.
    """
    file_hash: str
    filename: str
    size: int
    merkle_root: str
    owner: str
    authorized: FrozenSet[str]
    upload_count: int
    download_count: int
    verified_proof_count: int
    created_at: datetime
    first_verified_at: Optional[datetime] = None

    def is_verified(self, threshold: int) -> bool:
        return self.verified_proof_count >= threshold


@dataclass(frozen=True)
class FileView:
    """
    A file record paired with the verification threshold read in the same
    transaction, so ``verified`` agrees with the counts it is shown beside.
    """
    record: FileRecord
    threshold: int

    @property
    def verified(self) -> bool:
        return self.record.is_verified(self.threshold)


@dataclass(frozen=True)
class UploadReceipt:
    record: FileRecord
    fee_charged: int
    refund: int
    threshold: int


@dataclass(frozen=True)
class VerificationOutcome:
    """
    Result of one accepted proof.

    ``newly_verified`` is true only for the call that first takes the file
    to the threshold.
    """
    file_hash: str
    verified_proof_count: int
    threshold: int
    verified: bool
    newly_verified: bool


@dataclass(frozen=True)
class SystemStats:
    total_users: int = 0
    total_files: int = 0
    total_verified_files: int = 0
    total_uploads: int = 0
    total_downloads: int = 0


@dataclass(frozen=True)
class Settings:
    """
    Admin-tunable parameters plus pause state and fee bookkeeping.
    """
    paused: bool
    storage_fee: int
    verification_threshold: int
    default_quota: int
    max_quota: int
    fees_collected: int = field(default=0)
