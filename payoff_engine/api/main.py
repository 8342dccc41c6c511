"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from payoff_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from payoff_engine.api.v1 import payoff, projections
from payoff_engine.infrastructure.observability.logging import setup_logging
from payoff_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Payoff Engine",
        description="Debt payoff simulation and financial trend projection service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(payoff.router, prefix="/v1", tags=["payoff"])
    app.include_router(projections.router, prefix="/v1", tags=["projections"])

    return app


app = create_app()
