# backend/skilloop/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import APIRouter, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import (
    admin as admin_v1,
    admin_content as admin_content_v1,
    admin_payouts as admin_payouts_v1,
    bookings as bookings_v1,
    content as content_v1,
    feedback as feedback_v1,
    messages as messages_v1,
    notifications as notifications_v1,
    payments as payments_v1,
    profiles as profiles_v1,
    reviews as reviews_v1,
    settings as settings_v1,
    trainers as trainers_v1,
    training_requests as training_requests_v1,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if not settings.paypal_client_id:
        logger.warning("PayPal credentials are not configured; checkout will be unavailable")
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(route.methods or []))
    return f"{route.name}_{methods}".lower()


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)
# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(PrometheusMiddleware)

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(profiles_v1.router, prefix="/profiles")
api_v1.include_router(settings_v1.router, prefix="/settings")
api_v1.include_router(trainers_v1.router, prefix="/trainers")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(payments_v1.router, prefix="/payments")
api_v1.include_router(messages_v1.router, prefix="/messages")
api_v1.include_router(notifications_v1.router, prefix="/notifications")
api_v1.include_router(training_requests_v1.router, prefix="/training-requests")
api_v1.include_router(training_requests_v1.applications_router, prefix="/training-applications")
api_v1.include_router(feedback_v1.router, prefix="/feedback")
api_v1.include_router(reviews_v1.router, prefix="/reviews")
api_v1.include_router(content_v1.router)
api_v1.include_router(admin_payouts_v1.router, prefix="/admin/payouts")
api_v1.include_router(admin_content_v1.router, prefix="/admin")
api_v1.include_router(admin_v1.router, prefix="/admin")
app.include_router(api_v1)


@app.get("/health", tags=["health"])
def health() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "service": f"{BRAND_NAME.lower().replace(' ', '-')}-api",
        "version": API_VERSION,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=prometheus_metrics.get_metrics(), media_type=prometheus_metrics.get_content_type())
