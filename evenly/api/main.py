"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from evenly.api.dependencies import get_request_id
from evenly.api.middleware import RequestIDMiddleware, MetricsMiddleware
from evenly.api.v1 import balance, itemizer, parser
from evenly.domain.itemizer import Itemizer
from evenly.domain.ledger import Ledger
from evenly.infrastructure.observability.logging import setup_logging
from evenly.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application with its own Ledger and Itemizer"""
    app = FastAPI(
        title="Evenly",
        description="Receipt splitting and settlement service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # One ledger and one itemizer per application instance
    app.state.ledger = Ledger(person_id_prefix=settings.person_id_prefix)
    app.state.itemizer = Itemizer()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logging.error(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(balance.router, prefix="/v1", tags=["balance"])
    app.include_router(itemizer.router, prefix="/v1", tags=["itemizer"])
    app.include_router(parser.router, prefix="/v1", tags=["parser"])

    return app


app = create_app()
