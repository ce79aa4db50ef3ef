"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import get_repository
from app.jobs.refresh_entries import refresh_entries
from app.jobs.scheduler import register_jobs, scheduler
from app.routers import dashboard, resources
from app.services.entry_repository import EntryRepository
from app.utils.errors import AppError, InvalidInputError, SyncError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fill the collections once, then run the periodic refresh while the app is up."""
    if settings.load_on_startup:
        # A failed first load is logged by the job; the app starts with empty collections.
        await refresh_entries()
    if settings.enable_scheduler:
        register_jobs()
        scheduler.start()
        logger.info(
            "Refresh scheduler started (every %s min)", settings.refresh_interval_minutes
        )
    yield
    if settings.enable_scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Refresh scheduler stopped")


app = FastAPI(
    title=settings.app_name,
    description="FOAM resource distribution tracking - aggregates and dashboard geometry",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_timing_middleware(request: Request, call_next):
    """Add per-request processing time and optionally log slow requests."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"

    threshold_ms = settings.slow_request_log_threshold_ms
    if threshold_ms > 0 and elapsed_ms >= threshold_ms:
        logger.warning(
            "Slow request %s %s %.1fms",
            request.method,
            request.url.path,
            elapsed_ms,
        )

    return response


@app.exception_handler(SyncError)
async def sync_error_handler(request: Request, exc: SyncError) -> JSONResponse:
    """Backend did not acknowledge; tell the client when to retry."""
    logger.warning("Sync failed for %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers={"Retry-After": str(settings.sync_retry_after_seconds)},
    )


@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """Convert domain exceptions into structured API responses."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Normalize FastAPI validation responses, naming the offending parameter."""
    detail = exc.errors()
    first = detail[0] if detail else {}
    api_error = InvalidInputError(first.get("msg", "Invalid request"))
    content = api_error.to_dict()
    loc = [str(part) for part in first.get("loc", ()) if part not in ("query", "path", "body")]
    if loc:
        content["field"] = ".".join(loc)
    return JSONResponse(status_code=api_error.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Catch unexpected errors without leaking internals."""
    logger.exception("Unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


app.include_router(resources.router, prefix="/resources", tags=["resources"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])


@app.get("/health")
def health(repository: EntryRepository = Depends(get_repository)) -> dict:
    """Health check with the loaded collection size for deploys and uptime probes."""
    return {
        "status": "ok",
        "version": settings.app_version,
        "backend": settings.resource_backend,
        "entries": len(repository.snapshot()),
        "collection_version": repository.version,
    }
