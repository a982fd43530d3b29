"""Service layer: the registries, the gateway and authentication."""

from vault.services.access_registry import AccessRegistry
from vault.services.file_registry import FileRegistry
from vault.services.proof_verifier import ProofVerifier
from vault.services.gateway import Gateway
from vault.services.auth_service import AuthService

__all__ = [
    "AccessRegistry",
    "FileRegistry",
    "ProofVerifier",
    "Gateway",
    "AuthService",
]
