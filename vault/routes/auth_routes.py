"""Authentication API routes."""

from fastapi import APIRouter, status

from vault import service_locator
from vault.schemas.auth import ApiKeyResponse, LoginRequest, SignupRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=ApiKeyResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest):
    """
    Create credentials for an identity.

    Parameters:
        - identity: Identity the API Key will act as (must not already have an account)
        - password: Account password (stored as a bcrypt hash)

    Returns:
        - api_key: Generated API Key with 'pv_' prefix

    Raises:
        - 403: Identity reserved for the administrator
        - 409: Account already exists
        - 422: Password too short
    """
    auth_service = service_locator.get_auth_service()
    api_key = auth_service.signup(request.identity, request.password)

    return ApiKeyResponse(identity=request.identity, api_key=api_key)


@router.post("/login", response_model=ApiKeyResponse)
async def login(request: LoginRequest):
    """
    Authenticate and rotate the API Key.

    Raises:
        - 401: Invalid credentials
    """
    auth_service = service_locator.get_auth_service()
    api_key = auth_service.login(request.identity, request.password)

    return ApiKeyResponse(identity=request.identity, api_key=api_key)
