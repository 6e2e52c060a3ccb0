"""
Record Store - FastAPI Application

Main entry point for the API server.
Environment-agnostic: configuration reads from settings (.env file).
"""

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recordstore.exceptions import PersistenceError, UnknownRecordTypeError
from recordstore.logging_setup import setup_logging
from recordstore.models import MODELS
from recordstore.settings import get_settings
from api.dependencies import lifespan_handler
from api.routers import health, records

# Get settings
cfg = get_settings()

# Configure logging
setup_logging(cfg.log_level)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Mounts one records router per registered model.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Record Store API",
        description="CRUD and query endpoints over file-backed record collections",
        version="0.1.0",
        lifespan=lifespan_handler  # Handles startup/shutdown
    )

    # CORS configuration from settings
    logger.info(f"Configuring CORS with origins: {cfg.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Failed to write record store"})

    @app.exception_handler(UnknownRecordTypeError)
    async def unknown_type_handler(request: Request, exc: UnknownRecordTypeError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    # Mount routers
    for resource in MODELS:
        app.include_router(records.build_router(resource), prefix="/api/v1", tags=[resource])
    app.include_router(health.router, prefix="/api/v1/health", tags=["health"])

    logger.info(f"FastAPI application created (env={cfg.env}, resources={list(MODELS)})")

    return app


# Create app instance
app = create_app()


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "name": "Record Store API",
        "version": "0.1.0",
        "environment": cfg.env,
        "status": "running",
        "resources": [f"/api/v1/{resource}" for resource in MODELS],
        "docs": "/docs",
        "health": "/api/v1/health/ready"
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting API server on {cfg.api_host}:{cfg.api_port}")
    logger.info(f"Environment: {cfg.env}")
    logger.info(f"Data root: {cfg.data_root}")
    logger.info(f"Reload: {cfg.api_reload}")

    uvicorn.run(
        "api.main:app",
        host=cfg.api_host,
        port=cfg.api_port,
        reload=cfg.api_reload,
        workers=cfg.api_workers if not cfg.api_reload else 1,  # Workers only work without reload
        log_level=cfg.log_level.lower()
    )
