"""System statistics and settings API routes."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from vault import service_locator
from vault.auth import get_current_identity
from vault.schemas.system import SettingsResponse, SystemStatsResponse

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/stats", response_model=SystemStatsResponse)
async def get_system_stats(current_identity: str = Depends(get_current_identity)):
    gateway = service_locator.get_gateway()
    return SystemStatsResponse(**asdict(gateway.get_system_stats()))


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(current_identity: str = Depends(get_current_identity)):
    gateway = service_locator.get_gateway()
    return SettingsResponse(**asdict(gateway.get_settings()))
