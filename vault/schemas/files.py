"""Pydantic schemas for file and proof endpoints."""

from typing import List, Optional

from pydantic import BaseModel

from vault.types import FileRecord, FileView, VerificationOutcome


class UploadFileRequest(BaseModel):
    """Request model for registering an uploaded file."""
    file_hash: str
    filename: str
    size: int
    merkle_root: str
    fee_paid: int


class FileRecordResponse(BaseModel):
    """Response model for file metadata."""
    file_hash: str
    filename: str
    size: int
    merkle_root: str
    owner: str
    authorized: List[str]
    upload_count: int
    download_count: int
    verified_proof_count: int
    verified: bool
    created_at: str
    first_verified_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: FileRecord, threshold: int) -> "FileRecordResponse":
        return cls(
            file_hash=record.file_hash,
            filename=record.filename,
            size=record.size,
            merkle_root=record.merkle_root,
            owner=record.owner,
            authorized=sorted(record.authorized),
            upload_count=record.upload_count,
            download_count=record.download_count,
            verified_proof_count=record.verified_proof_count,
            verified=record.is_verified(threshold),
            created_at=record.created_at.isoformat(),
            first_verified_at=record.first_verified_at.isoformat() if record.first_verified_at else None,
        )

    @classmethod
    def from_view(cls, view: FileView) -> "FileRecordResponse":
        return cls.from_record(view.record, view.threshold)


class UploadFileResponse(BaseModel):
    """Response model for a successful upload."""
    file: FileRecordResponse
    fee_charged: int
    refund: int


class ListFilesResponse(BaseModel):
    files: List[FileRecordResponse]


class GranteeRequest(BaseModel):
    """Request model for authorize and revoke."""
    grantee: str


class ProofRequest(BaseModel):
    """
    Request model for proof submission.

    ``directions[i]`` is 'left' or 'right': the side proof_path[i] sits on.
    """
    claimed_root: str
    leaf_hash: str
    proof_path: List[str]
    directions: List[str]


class VerificationResponse(BaseModel):
    file_hash: str
    verified_proof_count: int
    threshold: int
    verified: bool
    newly_verified: bool

    @classmethod
    def from_outcome(cls, outcome: VerificationOutcome) -> "VerificationResponse":
        return cls(
            file_hash=outcome.file_hash,
            verified_proof_count=outcome.verified_proof_count,
            threshold=outcome.threshold,
            verified=outcome.verified,
            newly_verified=outcome.newly_verified,
        )
