# apigestion/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, all routers, and the
alert scheduler lifecycle.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from apigestion.routers import alerts, colonies, health, inspections
from apigestion.database import create_tables
from apigestion.config import settings
from apigestion.services.alert_service import AlertService
from apigestion.services.notification_service import AlertNotifier, EmailService
from apigestion.services.scheduler_service import AlertScheduler
from apigestion.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="ApiGestión Pro API",
    description="Beekeeping operations backend: recurring alerts and scheduling.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the web dashboard to call the API) ───────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth in front of every endpoint except health and docs.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key")
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


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(alerts.router,      prefix="/api/v1", tags=["🔔 Alerts"])
app.include_router(colonies.router,    prefix="/api/v1", tags=["🐝 Hives, swarms & nuclei"])
app.include_router(inspections.router, prefix="/api/v1", tags=["🔍 Inspections"])
app.include_router(health.router,      prefix="/api/v1", tags=["💚 Health"])


def build_services(app: FastAPI) -> AlertScheduler:
    """Wire notifier → alert engine → scheduler and keep them on app.state."""
    notifier = AlertNotifier(EmailService())
    app.state.alert_service = AlertService(notifier)
    app.state.scheduler = AlertScheduler(app.state.alert_service)
    return app.state.scheduler


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 ApiGestión backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    scheduler = build_services(app)
    if settings.SCHEDULER_ENABLED:
        scheduler.start()
    else:
        logger.info("⏸  Alert scheduler disabled (SCHEDULER_ENABLED=false)")

    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 ApiGestión backend shutting down...")
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.stop()
