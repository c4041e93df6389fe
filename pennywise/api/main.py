"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from pennywise.api.middleware import RequestIDMiddleware, MetricsMiddleware
from pennywise.api.v1 import payment_methods, transactions, summary
from pennywise.domain.exceptions import (
    InvalidPaymentMethodConfigError,
    InvalidTransactionDataError,
    PaymentMethodConfigNotFoundError,
)
from pennywise.infrastructure.database.migrations import apply_migrations
from pennywise.infrastructure.database.session import engine
from pennywise.infrastructure.observability.logging import setup_logging
from pennywise.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    apply_migrations(engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="PennyWise",
        description="Personal finance tracker with credit card billing cycles",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(PaymentMethodConfigNotFoundError)
    async def config_not_found(request: Request, exc: PaymentMethodConfigNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidPaymentMethodConfigError)
    @app.exception_handler(InvalidTransactionDataError)
    async def invalid_data(request: Request, exc: Exception):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(payment_methods.router, prefix="/v1", tags=["payment-methods"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()
