"""
Main FastAPI application for the Campus Verification Service.

Sets up the application with its routers, middleware and exception handlers,
and wires the data layer and identity provider on startup.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .dependencies import status_code_for
from .routers import admin_router, health_router, report_router, verification_router
from ...domain.errors import VerificationError
from ...infrastructure.data import get_repository_factory, close_repository_factory, DataConfig
from ...security.auth import JWTIdentityProvider

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Starting Campus Verification API...")

    try:
        config = DataConfig()
        repository_factory = await get_repository_factory(config)

        health_status = await repository_factory.health_check()
        if not health_status.get("overall"):
            logger.error("Health check failed during startup")
            raise RuntimeError("System health check failed")

        logger.info("Data layer initialized successfully")

        app.state.repository_factory = repository_factory
        app.state.identity_provider = JWTIdentityProvider(config.auth)
        app.state.config = config

        yield

    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    finally:
        logger.info("Shutting down Campus Verification API...")
        await close_repository_factory()
        logger.info("Shutdown complete")


app = FastAPI(
    title="Campus Verification API",
    description="""
    Student identity verification for the campus marketplace.

    ## Features

    * **Verification requests**: submit a student ID and COR image for review
    * **Access gate**: find out which screens a user may reach
    * **Administration**: decide requests, moderate accounts, review reports

    ## Authentication

    Every endpoint except the health checks expects a bearer token issued by
    the campus identity service. Admin endpoints require the admin role.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests for monitoring"""
    start_time = time.time()
    client = request.client.host if request.client else "unknown"

    logger.info(f"{request.method} {request.url.path} - {client}")

    try:
        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"{response.status_code} - {duration:.3f}s"
        )

        return response

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"{request.method} {request.url.path} - "
            f"ERROR: {str(e)} - {duration:.3f}s"
        )
        raise


def _error_content(request: Request, error: Any, status_code: int) -> Dict[str, Any]:
    return {
        "error": error,
        "status_code": status_code,
        "path": request.url.path,
        "method": request.method,
        "timestamp": time.time()
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with detailed error responses"""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(request, exc.detail, exc.status_code),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(VerificationError)
async def verification_error_handler(request: Request, exc: VerificationError):
    """Workflow errors that escaped a router"""
    status_code = status_code_for(exc)
    return JSONResponse(
        status_code=status_code,
        content=_error_content(request, exc.message, status_code)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    content = _error_content(request, "Internal server error", 500)
    content["message"] = "An unexpected error occurred"
    return JSONResponse(status_code=500, content=content)


app.include_router(
    health_router.router,
    prefix="/health",
    tags=["Health Check"]
)

app.include_router(
    verification_router.router,
    prefix="/api/v1/verification",
    tags=["Verification"]
)

app.include_router(
    admin_router.router,
    prefix="/api/v1/admin",
    tags=["Admin"]
)

app.include_router(
    report_router.router,
    prefix="/api/v1/reports",
    tags=["Reports"]
)


@app.get("/", response_model=Dict[str, Any])
async def root():
    """Root endpoint with API information"""
    return {
        "name": "Campus Verification API",
        "version": "1.0.0",
        "docs_url": "/docs",
        "health_check": "/health",
        "endpoints": {
            "verification": "/api/v1/verification",
            "admin": "/api/v1/admin",
            "reports": "/api/v1/reports"
        },
        "status": "active"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "campus_verification.application.api.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
