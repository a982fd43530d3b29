"""Pydantic schemas for system and admin endpoints."""

from pydantic import BaseModel


class SystemStatsResponse(BaseModel):
    total_users: int
    total_files: int
    total_verified_files: int
    total_uploads: int
    total_downloads: int


class SettingsResponse(BaseModel):
    paused: bool
    storage_fee: int
    verification_threshold: int
    default_quota: int
    max_quota: int
    fees_collected: int


class ValueRequest(BaseModel):
    """Request model for admin endpoints that set one integer."""
    value: int


class StatusResponse(BaseModel):
    status: str
