"""
FastAPI application entry point for WebAudit.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from webaudit.api.router import api_router
from webaudit.config import settings
from webaudit.core.cors import PreflightCORSMiddleware, cors_headers
from webaudit.core.rate_limit_middleware import RateLimitMiddleware
from webaudit.database import init_db
from webaudit.services.audit_recorder import AuditRecorder
from webaudit.services.cache import create_audit_cache
from webaudit.services.fetcher import PageFetcher
from webaudit.services.rate_limiter import create_rate_limiter

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    await init_db()
    app.state.rate_limiter = create_rate_limiter()
    app.state.audit_cache = create_audit_cache()
    app.state.fetcher = PageFetcher()
    app.state.recorder = AuditRecorder()
    yield
    # Shutdown
    await app.state.audit_cache.close()
    await app.state.rate_limiter.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Rate limiting middleware (outermost, so preflights are counted too)
if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(RateLimitMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
        headers=cors_headers(request.headers.get("origin")),
    )


# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.VERSION}


def run():
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "webaudit.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
