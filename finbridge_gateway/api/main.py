"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from finbridge_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finbridge_gateway.api.v1 import analytics, commands, loans, profile, transactions
from finbridge_gateway.infrastructure.database.models import Base
from finbridge_gateway.infrastructure.database.session import engine
from finbridge_gateway.infrastructure.observability.logging import setup_logging
from finbridge_gateway.services.assistant import SessionRegistry
from finbridge_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables before serving"""
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FinBridge Gateway",
        description="Voice-driven personal finance commands, analytics and loan simulation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.sessions = SessionRegistry(settings.default_language)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Record store error: {exc}",
            extra={"request_id": getattr(request.state, "request_id", "unknown")},
        )
        return JSONResponse(status_code=503, content={"detail": "Record store unavailable"})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(commands.router, prefix="/v1", tags=["commands"])
    app.include_router(analytics.router, prefix="/v1", tags=["analytics"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])

    return app


app = create_app()
