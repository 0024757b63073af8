"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from reverse_calc.api.middleware import RequestIDMiddleware, MetricsMiddleware
from reverse_calc.api.v1 import proposal
from reverse_calc.infrastructure.observability.logging import setup_logging
from reverse_calc.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Reverse Consolidation Calculator",
        description="MCA reverse consolidation schedule, savings and profitability engine",
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

    app.include_router(proposal.router, prefix="/v1", tags=["proposals"])

    return app


app = create_app()
