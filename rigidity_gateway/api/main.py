"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rigidity_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rigidity_gateway.api.v1 import expenses, profile, simulations, summary
from rigidity_gateway.infrastructure.observability.logging import setup_logging
from rigidity_gateway.config import settings

setup_logging(settings.log_level)

V1_ROUTERS = [
    (expenses.router, "expenses"),
    (profile.router, "profile"),
    (summary.router, "summary"),
    (simulations.router, "simulations"),
]


def create_app() -> FastAPI:
    """Build the gateway with request tracing, health and metrics routes and the /v1 API"""
    app = FastAPI(
        title="Rigidity Gateway",
        description="Expense cancelability scoring and insolvency risk reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Added last, RequestIDMiddleware runs outermost and tags every response
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        """Liveness for load balancers; touches neither the database nor auth"""
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        """Scoring, report and request counters in Prometheus text format"""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
