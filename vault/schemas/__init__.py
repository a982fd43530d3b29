"""Pydantic schemas for API requests and responses."""

from vault.schemas.auth import SignupRequest, LoginRequest, ApiKeyResponse
from vault.schemas.users import RegisterUserRequest, UserProfileResponse
from vault.schemas.files import (
    UploadFileRequest,
    UploadFileResponse,
    FileRecordResponse,
    ListFilesResponse,
    GranteeRequest,
    ProofRequest,
    VerificationResponse,
)
from vault.schemas.system import SystemStatsResponse, SettingsResponse, ValueRequest, StatusResponse
from vault.schemas.common import ErrorResponse

__all__ = [
    "SignupRequest",
    "LoginRequest",
    "ApiKeyResponse",
    "RegisterUserRequest",
    "UserProfileResponse",
    "UploadFileRequest",
    "UploadFileResponse",
    "FileRecordResponse",
    "ListFilesResponse",
    "GranteeRequest",
    "ProofRequest",
    "VerificationResponse",
    "SystemStatsResponse",
    "SettingsResponse",
    "ValueRequest",
    "StatusResponse",
    "ErrorResponse",
]
