"""
Sports Events API - Main Application Entry Point

CRUD and booking backend for a sports-events listing platform:
- Categories, venues, events, users and bookings over a relational store
- Capacity-safe booking workflow serialized per event
- Redis read-through cache for category and venue lookups
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from sports_events.api.dependencies import get_cache
from sports_events.api.middleware import RequestLoggingMiddleware
from sports_events.api.router import api_router
from sports_events.core.config import get_settings
from sports_events.core.exceptions import (
    DomainError,
    ErrorCode,
    NotFoundError,
    StoreUnavailableError,
)
from sports_events.core.logging import setup_logging, get_logger
from sports_events.core.metrics import metrics_endpoint
from sports_events.db.seed import seed_demo_data
from sports_events.db.session import AsyncSessionLocal, engine
from sports_events.services.cache_service import ReadThroughCache, connect_redis

settings = get_settings()
logger = get_logger(__name__)

RETRY_AFTER_SECONDS = "1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    redis_client = await connect_redis(settings)
    if redis_client is None:
        logger.warning("redis_unavailable", message="Running without cache")
    app.state.cache = ReadThroughCache(redis_client, settings.CACHE_NAMESPACE)

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_demo_data(session)

    yield

    if redis_client is not None:
        await redis_client.aclose()
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Sports events listing and booking API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


def _error(status_code: int, detail: str, code: ErrorCode, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code.value},
        headers=headers,
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.warning("store_unavailable", detail=exc.message)
    return _error(
        status.HTTP_503_SERVICE_UNAVAILABLE, exc.message, exc.code, {"Retry-After": RETRY_AFTER_SECONDS}
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    logger.info("request_rejected", code=exc.code.value, detail=exc.message)
    return _error(status_code, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
    )
    logger.info("request_invalid", errors=len(errors))
    return _error(status.HTTP_400_BAD_REQUEST, detail, ErrorCode.VALIDATION_FAILED)


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def database_unavailable_handler(request: Request, exc: Exception):
    logger.error("database_unavailable", error=str(exc))
    return _error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Data store temporarily unavailable",
        ErrorCode.STORE_UNAVAILABLE,
        {"Retry-After": RETRY_AFTER_SECONDS},
    )


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache(request).stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
