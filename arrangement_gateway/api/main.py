"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from arrangement_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from arrangement_gateway.api.v1 import arrangements, calculator, tenants
from arrangement_gateway.infrastructure.observability.logging import setup_logging
from arrangement_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Arrangement Gateway",
        description="Payment arrangement quotes, schedules and acceptance",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(calculator.router, prefix="/v1", tags=["calculator"])
    app.include_router(tenants.router, prefix="/v1", tags=["tenants"])
    app.include_router(arrangements.router, prefix="/v1", tags=["arrangements"])

    return app


app = create_app()
