"""Service locator for the process-wide gateway and auth service."""

from typing import Optional

from vault.services.auth_service import AuthService
from vault.services.gateway import Gateway

_gateway: Optional[Gateway] = None
_auth_service: Optional[AuthService] = None


def set_gateway(gateway: Optional[Gateway]) -> None:
    """Set global gateway instance"""
    global _gateway
    _gateway = gateway


def get_gateway() -> Gateway:
    """Get global gateway instance"""
    if _gateway is None:
        raise RuntimeError("Gateway not configured; call set_gateway() at startup")
    return _gateway


def set_auth_service(service: Optional[AuthService]) -> None:
    """Set global auth service instance"""
    global _auth_service
    _auth_service = service


def get_auth_service() -> AuthService:
    """Get global auth service instance"""
    if _auth_service is None:
        raise RuntimeError("Auth service not configured; call set_auth_service() at startup")
    return _auth_service


def is_configured() -> bool:
    return _gateway is not None and _auth_service is not None
