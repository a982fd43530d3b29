"""Entry point for the ProofVault server."""

import sqlite3
import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from vault import config, service_locator
from vault.database import get_db_connection, init_database
from vault.exceptions import StorageUnavailableError, VaultError
from vault.routes import admin_router, auth_router, file_router, system_router, user_router
from vault.services.auth_service import AuthService
from vault.services.gateway import Gateway

logger = setup_logging('vault')

app = FastAPI(
    title="ProofVault",
    description="Access-controlled, proof-verified file registry",
    version="1.0.0"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize the database and wire the gateway on application startup.
    """
    logger.info("ProofVault starting up...")

    if service_locator.is_configured():
        logger.info("Services already configured; skipping database initialization")
        return

    init_database(config.DATABASE_PATH)
    logger.info("Database initialized")

    service_locator.set_gateway(Gateway(config.ADMIN_IDENTITY, config.DATABASE_PATH))
    auth_service = AuthService(config.DATABASE_PATH, admin_identity=config.ADMIN_IDENTITY)
    if config.ADMIN_PASSWORD:
        auth_service.provision_admin(config.ADMIN_PASSWORD)
    else:
        logger.warning("PV_ADMIN_PASSWORD is not set; the administrator cannot log in")
    service_locator.set_auth_service(auth_service)
    logger.info(f"Gateway ready [admin={config.ADMIN_IDENTITY}]")


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Storage unavailable: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "code": exc.code}
    )


@app.exception_handler(VaultError)
async def vault_error_handler(request: Request, exc: VaultError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "code": exc.code}
    )


@app.exception_handler(sqlite3.Error)
async def sqlite_error_handler(request: Request, exc: sqlite3.Error):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Database error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable", "code": StorageUnavailableError.code}
    )


app.include_router(auth_router)
app.include_router(user_router)
app.include_router(file_router)
app.include_router(system_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "ProofVault API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "vault"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies the database is reachable and the gateway is wired.
    """
    db_path = service_locator.get_gateway().db_path if service_locator.is_configured() else config.DATABASE_PATH

    try:
        with get_db_connection(db_path) as conn:
            conn.execute("SELECT 1 FROM system_state WHERE id = 1").fetchone()
        db_status = "ok"
    except (StorageUnavailableError, sqlite3.Error) as e:
        db_status = f"error: {str(e)}"

    ready = db_status == "ok" and service_locator.is_configured()
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "database": db_status,
            "configured": service_locator.is_configured()
        }
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "vault.main:app",
        host=config.SERVER_HOST,
        port=config.SERVER_PORT,
    )


if __name__ == "__main__":
    main()
