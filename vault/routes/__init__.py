"""API routes package."""

from vault.routes.auth_routes import router as auth_router
from vault.routes.user_routes import router as user_router
from vault.routes.file_routes import router as file_router
from vault.routes.system_routes import router as system_router
from vault.routes.admin_routes import router as admin_router

__all__ = ["auth_router", "user_router", "file_router", "system_router", "admin_router"]
