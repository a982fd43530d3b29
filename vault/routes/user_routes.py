"""User profile API routes."""

from fastapi import APIRouter, Depends, status

from vault import service_locator
from vault.auth import get_current_identity
from vault.schemas.files import FileRecordResponse, ListFilesResponse
from vault.schemas.users import RegisterUserRequest, UserProfileResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserProfileResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    request: RegisterUserRequest,
    current_identity: str = Depends(get_current_identity)
):
    """
    Register a profile for the calling identity.

    Raises:
        - 400: Name shorter than three characters
        - 409: Identity already registered or name taken
        - 503: System paused
    """
    gateway = service_locator.get_gateway()
    profile = gateway.register_user(current_identity, request.name)
    return UserProfileResponse.from_profile(profile)


@router.get("/me", response_model=UserProfileResponse)
async def get_my_profile(current_identity: str = Depends(get_current_identity)):
    gateway = service_locator.get_gateway()
    return UserProfileResponse.from_profile(gateway.get_profile(current_identity))


@router.get("/{identity}", response_model=UserProfileResponse)
async def get_profile(identity: str, current_identity: str = Depends(get_current_identity)):
    gateway = service_locator.get_gateway()
    return UserProfileResponse.from_profile(gateway.get_profile(identity))


@router.get("/{identity}/files", response_model=ListFilesResponse)
async def list_user_files(identity: str, current_identity: str = Depends(get_current_identity)):
    """
    List the files owned by an identity, oldest first.
    """
    gateway = service_locator.get_gateway()
    views = gateway.list_user_files(identity)
    return ListFilesResponse(files=[FileRecordResponse.from_view(v) for v in views])
