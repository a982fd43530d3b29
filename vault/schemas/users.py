"""Pydantic schemas for user profile endpoints."""

from pydantic import BaseModel

from vault.types import UserProfile


class RegisterUserRequest(BaseModel):
    """Request model for profile registration."""
    name: str


class UserProfileResponse(BaseModel):
    identity: str
    name: str
    registered_at: str
    last_activity_at: str
    storage_used: int
    storage_quota: int
    storage_available: int
    suspended: bool

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserProfileResponse":
        return cls(
            identity=profile.identity,
            name=profile.name,
            registered_at=profile.registered_at.isoformat(),
            last_activity_at=profile.last_activity_at.isoformat(),
            storage_used=profile.storage_used,
            storage_quota=profile.storage_quota,
            storage_available=profile.storage_available,
            suspended=profile.suspended,
        )
