"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from movasafe_analytics.api.dependencies import get_request_id
from movasafe_analytics.api.middleware import RequestIDMiddleware, MetricsMiddleware
from movasafe_analytics.api.v1 import analytics, financial
from movasafe_analytics.domain.exceptions import (
    InvalidDateRangeError,
    InvalidFilterError,
    UnknownForecastMethodError,
    UnknownThresholdTypeError,
)
from movasafe_analytics.infrastructure.observability.logging import setup_logging
from movasafe_analytics.config import settings

# Setup structured logging
setup_logging(settings.log_level)

# Caller-supplied values the domain layer refuses; all map to 422
INVALID_INPUT_ERRORS = (
    InvalidDateRangeError,
    InvalidFilterError,
    UnknownForecastMethodError,
    UnknownThresholdTypeError,
)


async def invalid_input_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.warning(f"Rejected request input: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Movasafe Analytics",
        description="Transaction trend aggregation, KPIs, anomaly detection and forecasting",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    for error_type in INVALID_INPUT_ERRORS:
        app.add_exception_handler(error_type, invalid_input_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(analytics.router, prefix="/v1", tags=["analytics"])
    app.include_router(financial.router, prefix="/v1", tags=["financial"])

    return app


app = create_app()
