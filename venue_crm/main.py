import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging

from venue_crm.api.v1.router import router as api_v1_router
from venue_crm.core.cache import CacheService
from venue_crm.core.config import settings as app_settings
from venue_crm.core.database import AsyncSessionLocal
from venue_crm.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
    VenueCRMError,
)
from venue_crm.core.rate_limit import limiter
from venue_crm.dependencies import get_redis_client
from venue_crm.services.bulk_progression import start_bulk_progression_loop

# Configure logging
logging.basicConfig(level=app_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application-level background tasks."""
    progression_task = None
    if app_settings.BULK_PROGRESSION_ENABLED:
        cache = CacheService(redis_client=await get_redis_client())
        progression_task = asyncio.create_task(
            start_bulk_progression_loop(AsyncSessionLocal, cache=cache)
        )
        logger.info("Background bulk stage progression task scheduled")
    yield
    if progression_task is not None:
        progression_task.cancel()
        try:
            await progression_task
        except asyncio.CancelledError:
            logger.info("Background bulk stage progression task stopped")


app = FastAPI(
    title="Venue CRM",
    description="Lead heat scoring and automated stage progression for venue sales",
    version="0.1.0",
    lifespan=lifespan,
)

# Attach rate limiter state so slowapi middleware can find it
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware – restricted to configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in app_settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.warning("Not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "not_found"},
    )


@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    logger.warning("Validation failed: %s", exc.detail)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.detail, "type": "validation_error"},
    )


@app.exception_handler(AuthorizationError)
async def authorization_handler(request: Request, exc: AuthorizationError):
    logger.warning("Authorization denied on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=403,
        content={"detail": exc.detail, "type": "forbidden"},
    )


@app.exception_handler(VenueCRMError)
async def domain_error_handler(request: Request, exc: VenueCRMError):
    logger.warning("Domain error: %s", exc.detail)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.detail, "type": "domain_error"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Request validation error: %s", exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": jsonable_encoder(exc.errors()),
            "type": "validation_error",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected/unhandled exceptions.

    Returns a generic 500 response so that raw stack traces are never
    leaked to the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected internal error occurred. Please try again later.",
            "type": "internal_server_error",
        },
    )
