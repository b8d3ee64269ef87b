"""
FastAPI application entry point.
Includes security middleware, error handlers mapping the core error
taxonomy to HTTP, all routers, and the periodic gauge refresher.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import places, checkins, infections, gauges, health
from app.database import create_tables
from app.config import settings
from app.errors import NotFound, InvalidArgument, ResourceUnavailable, InvariantViolation
from app.services.gauge_scheduler import run_gauge_refresher
from app.utils.logger import get_logger
import time
import asyncio

logger = get_logger(__name__)

app = FastAPI(
    title="Venue Check-in API",
    description="Venue check-in, live occupancy gauges and proximity search for contact tracing.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth in front of the whole API.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Core Error Handlers ──────────────────────────────────────────────────────
@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument):
    logger.warning(f"Rejected {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(ResourceUnavailable)
async def unavailable_handler(request: Request, exc: ResourceUnavailable):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
        headers={"Retry-After": str(settings.RETRY_AFTER_SECONDS)},
    )


@app.exception_handler(InvariantViolation)
async def invariant_handler(request: Request, exc: InvariantViolation):
    logger.error(f"Invariant violation on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(places.router,     prefix="/api/v1", tags=["Places"])
app.include_router(checkins.router,   prefix="/api/v1", tags=["Check-ins"])
app.include_router(infections.router, prefix="/api/v1", tags=["Infections"])
app.include_router(gauges.router,     prefix="/api/v1", tags=["Gauges"])
app.include_router(health.router,     prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Check-in backend starting up...")
    create_tables()
    logger.info("Database tables ready")

    if settings.GAUGE_REFRESH_INTERVAL_SECONDS > 0:
        app.state.gauge_task = asyncio.create_task(run_gauge_refresher(), name="gauge-refresher")
    else:
        logger.info("Gauge refresher disabled (GAUGE_REFRESH_INTERVAL_SECONDS=0)")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Check-in backend shutting down...")
    task = getattr(app.state, "gauge_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        app.state.gauge_task = None
