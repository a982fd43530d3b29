"""Administrator API routes.

Every route is gated by the gateway itself: a caller other than the
configured administrator receives NOT_ADMIN.
"""

from fastapi import APIRouter, Depends

from vault import service_locator
from vault.auth import get_current_identity
from vault.schemas.system import StatusResponse, ValueRequest
from vault.schemas.users import UserProfileResponse

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/pause", response_model=StatusResponse)
async def pause(current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().pause(current_identity)
    return StatusResponse(status="paused")


@router.post("/unpause", response_model=StatusResponse)
async def unpause(current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().unpause(current_identity)
    return StatusResponse(status="active")


@router.put("/storage-fee", response_model=StatusResponse)
async def set_storage_fee(request: ValueRequest, current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().set_storage_fee(current_identity, request.value)
    return StatusResponse(status="updated")


@router.put("/verification-threshold", response_model=StatusResponse)
async def set_verification_threshold(request: ValueRequest, current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().set_verification_threshold(current_identity, request.value)
    return StatusResponse(status="updated")


@router.put("/default-quota", response_model=StatusResponse)
async def set_default_quota(request: ValueRequest, current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().set_default_quota(current_identity, request.value)
    return StatusResponse(status="updated")


@router.put("/max-quota", response_model=StatusResponse)
async def set_max_quota(request: ValueRequest, current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().set_max_quota(current_identity, request.value)
    return StatusResponse(status="updated")


@router.put("/users/{identity}/quota", response_model=UserProfileResponse)
async def set_user_quota(
    identity: str,
    request: ValueRequest,
    current_identity: str = Depends(get_current_identity)
):
    profile = service_locator.get_gateway().set_user_quota(current_identity, identity, request.value)
    return UserProfileResponse.from_profile(profile)


@router.post("/users/{identity}/suspend", response_model=StatusResponse)
async def suspend_user(identity: str, current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().suspend_user(current_identity, identity)
    return StatusResponse(status="suspended")


@router.post("/users/{identity}/unsuspend", response_model=StatusResponse)
async def unsuspend_user(identity: str, current_identity: str = Depends(get_current_identity)):
    service_locator.get_gateway().unsuspend_user(current_identity, identity)
    return StatusResponse(status="active")
