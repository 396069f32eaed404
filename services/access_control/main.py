"""
Access Control Service - Main Application
=========================================

FastAPI application for credential issuance, relying-party policies and
proof-gated access.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from noah.config import settings
from noah.ledger import (
    IdentityConflict,
    NoahError,
    PolicyNotSet,
    RegistryConflict,
    UnauthorizedCaller,
    get_ledger,
)
from noah.logging import get_logger, setup_logging
from noah.models.common import ErrorResponse, HealthResponse
from services.access_control.routes import issuer, proofs, protocol, user


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="access_control",
)

logger = get_logger(__name__)

# Ledger errors that do not map to 400 Bad Request
ERROR_STATUS: dict[type[NoahError], int] = {
    UnauthorizedCaller: status.HTTP_403_FORBIDDEN,
    PolicyNotSet: status.HTTP_404_NOT_FOUND,
    IdentityConflict: status.HTTP_409_CONFLICT,
    RegistryConflict: status.HTTP_409_CONFLICT,
}


def status_for(exc: NoahError) -> int:
    """HTTP status for a ledger error."""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "access_control_service_starting",
        environment=settings.environment.value,
        port=settings.ports.access_control,
    )

    # Startup
    ledger = get_ledger()
    logger.info(
        "ledger_connected",
        mode=settings.ledger.mode.value,
        backend=ledger.backend.name,
    )

    yield

    # Shutdown
    logger.info("access_control_service_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="NOAH Access Control Service",
    description="Zero-knowledge KYC: credential registry, relying-party policies and proof-gated access",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and the ledger.
    """
    ledger_health = get_ledger().health_check()
    backend_health = ledger_health.pop("backend")

    components: dict[str, dict[str, Any]] = {
        "ledger": ledger_health,
        "proof_backend": backend_health,
    }

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="access_control",
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "NOAH Access Control Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    issuer.router,
    prefix="/api/v1/issuer",
    tags=["Issuer"],
)

app.include_router(
    protocol.router,
    prefix="/api/v1/protocol",
    tags=["Protocol"],
)

app.include_router(
    user.router,
    prefix="/api/v1/user",
    tags=["User"],
)

app.include_router(
    proofs.router,
    prefix="/api/v1/proof",
    tags=["ZK Proofs"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(NoahError)
async def ledger_exception_handler(request: Request, exc: NoahError) -> JSONResponse:
    """Handle ledger rejections."""
    status_code = status_for(exc)

    logger.warning(
        "ledger_call_rejected",
        error_code=exc.code,
        status_code=status_code,
        path=request.url.path,
        context=exc.context,
    )
    body = ErrorResponse(
        error=exc.message,
        error_code=exc.code,
        details=exc.context or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.access_control.main:app",
        host="0.0.0.0",
        port=settings.ports.access_control,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
