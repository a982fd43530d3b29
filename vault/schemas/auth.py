"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel


class SignupRequest(BaseModel):
    """Request model for account creation."""
    identity: str
    password: str


class LoginRequest(BaseModel):
    """Request model for login."""
    identity: str
    password: str


class ApiKeyResponse(BaseModel):
    """Response model carrying a freshly issued API Key."""
    identity: str
    api_key: str
