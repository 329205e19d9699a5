"""Arena Fund Intake — application validation and intake service.

Main FastAPI application with lifespan management, CORS, and global error handling.
"""

import logging
from contextlib import asynccontextmanager

import structlog
import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from arena.config import get_settings
from arena.api.router import api_router
from arena.services.rate_limiter import TokenBucketRateLimiter
from arena.services.submission_store import (
    InMemorySubmissionStore,
    RedisSubmissionStore,
    StoreUnavailableError,
)

settings = get_settings()

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    settings = get_settings()

    # ── Startup ──
    logger.info("app_starting", debug=settings.DEBUG)

    store = None
    if settings.USE_REDIS:
        try:
            redis_client = aioredis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                encoding="utf-8",
            )
            await redis_client.ping()
            store = RedisSubmissionStore(
                redis_client,
                ttl_seconds=settings.SUBMISSION_TTL_SECONDS,
                max_retries=settings.STORE_MAX_RETRIES,
            )
            logger.info("redis_connected")
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))

    if store is None:
        # App can still start; submissions live in process memory until restart
        store = InMemorySubmissionStore(
            ttl_seconds=settings.SUBMISSION_TTL_SECONDS,
            max_entries=settings.MEMORY_STORE_MAX_ENTRIES,
        )
        logger.warning("memory_store_in_use", max_entries=settings.MEMORY_STORE_MAX_ENTRIES)

    app.state.submission_store = store
    app.state.rate_limiter = TokenBucketRateLimiter(
        max_tokens=settings.RATE_LIMIT_MAX_SUBMISSIONS,
        refill_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        max_clients=settings.RATE_LIMIT_MAX_CLIENTS,
    )

    try:
        recent = await store.list_recent(limit=100)
        logger.info("store_ready", store=type(store).__name__, recent_submissions=len(recent))
    except StoreUnavailableError as e:
        logger.warning("store_not_ready", store=type(store).__name__, error=str(e))

    logger.info("app_started")

    yield

    # ── Shutdown ──
    logger.info("app_shutting_down")

    await app.state.submission_store.close()

    logger.info("app_stopped")


# ── Create Application ──

app = FastAPI(
    title="Arena Fund Intake",
    description=(
        "Validation and intake for Arena Fund founder and investor applications. "
        "Covers field checks, 506(b)/506(c) business rules, and live "
        "single-field validation."
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ── Middleware ──

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Global Exception Handlers ──

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all error handler for unhandled exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again.",
        },
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "message": str(exc)},
    )


# ── Routes ──

app.include_router(api_router, prefix="/api/v1")


# ── Root endpoint ──

@app.get("/")
async def root():
    """Root endpoint — API info."""
    return {
        "name": "Arena Fund Intake",
        "version": "1.0.0",
        "description": "Founder and investor application validation",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
