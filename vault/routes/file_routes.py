"""File and proof API routes."""

from fastapi import APIRouter, Depends, status

from vault import service_locator
from vault.auth import get_current_identity
from vault.schemas.files import (
    FileRecordResponse,
    GranteeRequest,
    ProofRequest,
    UploadFileRequest,
    UploadFileResponse,
    VerificationResponse,
)

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=UploadFileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: UploadFileRequest,
    current_identity: str = Depends(get_current_identity)
):
    """
    Register an uploaded file and pay its storage fee.

    Only metadata travels: the content hash, the Merkle root over the file's
    chunks, its size and the fee offered. Any excess over the storage fee is
    returned as ``refund``.

    Raises:
        - 402: Fee below the storage fee
        - 403: Caller not registered or suspended
        - 409: File hash already registered
        - 503: System paused
        - 507: Quota exceeded
    """
    gateway = service_locator.get_gateway()
    receipt = gateway.upload_file(
        current_identity,
        request.file_hash,
        request.filename,
        request.size,
        request.merkle_root,
        request.fee_paid,
    )
    return UploadFileResponse(
        file=FileRecordResponse.from_record(receipt.record, receipt.threshold),
        fee_charged=receipt.fee_charged,
        refund=receipt.refund,
    )


@router.get("/{file_hash}", response_model=FileRecordResponse)
async def get_file(file_hash: str, current_identity: str = Depends(get_current_identity)):
    gateway = service_locator.get_gateway()
    return FileRecordResponse.from_view(gateway.get_file(file_hash))


@router.post("/{file_hash}/download", response_model=FileRecordResponse)
async def download_file(file_hash: str, current_identity: str = Depends(get_current_identity)):
    """
    Record a download by the caller.

    Raises:
        - 403: Caller not authorized for this file
        - 404: File not found
    """
    gateway = service_locator.get_gateway()
    return FileRecordResponse.from_view(gateway.download_file(current_identity, file_hash))


@router.post("/{file_hash}/authorize", response_model=FileRecordResponse)
async def authorize_user(
    file_hash: str,
    request: GranteeRequest,
    current_identity: str = Depends(get_current_identity)
):
    gateway = service_locator.get_gateway()
    return FileRecordResponse.from_view(gateway.authorize_user(current_identity, file_hash, request.grantee))


@router.post("/{file_hash}/revoke", response_model=FileRecordResponse)
async def revoke_user(
    file_hash: str,
    request: GranteeRequest,
    current_identity: str = Depends(get_current_identity)
):
    gateway = service_locator.get_gateway()
    return FileRecordResponse.from_view(gateway.revoke_user(current_identity, file_hash, request.grantee))


@router.post("/{file_hash}/proofs", response_model=VerificationResponse)
async def submit_proof(
    file_hash: str,
    request: ProofRequest,
    current_identity: str = Depends(get_current_identity)
):
    """
    Submit a Merkle inclusion proof for a file.

    Raises:
        - 400: Proof path and directions differ in length or contain bad values
        - 404: File not found
        - 422: Proof does not fold to the stored Merkle root
    """
    gateway = service_locator.get_gateway()
    outcome = gateway.verify_file_proof(
        file_hash,
        request.claimed_root,
        request.proof_path,
        request.directions,
        request.leaf_hash,
    )
    return VerificationResponse.from_outcome(outcome)
