"""FastAPI application for the sourcing engine."""

import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from sourcewise import __version__
from sourcewise.core.errors import CollaboratorUnavailable, NotFound, ValidationError
from sourcewise.engine import SourcingEngine, create_engine
from sourcewise.infrastructure import bind_context, clear_context, get_logger, record_request

from .routes import health_router, matching_router, negotiation_router
from .schemas import ErrorDetail, ErrorResponse

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


def _error(status_code: int, error: str, detail: ErrorDetail, request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            details=[detail],
            request_id=request.headers.get(CORRELATION_ID_HEADER),
            timestamp=datetime.now(),
        ).model_dump(mode="json"),
    )


def create_app(engine: SourcingEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        engine: Engine to serve. Built from settings at startup when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = engine is None
        app.state.engine = engine or create_engine()
        logger.info(
            "api_startup",
            version=__version__,
            market_data=type(app.state.engine.collaborators.market_data).__name__,
        )
        yield
        if owned:
            await app.state.engine.close()
        logger.info("api_shutdown")

    app = FastAPI(
        title="Sourcewise API",
        description="""
## Supplier Discovery and Negotiation

- **Matching**: rank suppliers for a requirement with a weighted factor score
- **Negotiation**: market, supplier-risk and strategy analysis of multi-item RFQs
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    if engine is not None:
        app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        """Bind a correlation ID to the logging context of each request."""
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())
        clear_context()
        bind_context(correlation_id=correlation_id)

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        response.headers[CORRELATION_ID_HEADER] = correlation_id

        # Skip /metrics and health probes
        skip_metrics = request.url.path.startswith(("/metrics", "/health", "/ready", "/live"))
        if not skip_metrics:
            record_request(
                endpoint=request.url.path,
                method=request.method,
                status=response.status_code,
                duration=duration,
            )
            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )

        return response

    app.include_router(health_router)
    app.include_router(matching_router)
    app.include_router(negotiation_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
        return _error(
            404,
            "Not Found",
            ErrorDetail(code="NOT_FOUND", message=str(exc), field=exc.kind),
            request,
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("request_rejected", field=exc.field, error=exc.message)
        return _error(
            422,
            "Validation Error",
            ErrorDetail(code="INVALID_FIELD", message=exc.message, field=exc.field),
            request,
        )

    @app.exception_handler(CollaboratorUnavailable)
    async def unavailable_handler(request: Request, exc: CollaboratorUnavailable) -> JSONResponse:
        logger.warning("collaborator_unavailable", collaborator=exc.collaborator, reason=exc.reason)
        return _error(
            503,
            "Service Unavailable",
            ErrorDetail(code="COLLABORATOR_UNAVAILABLE", message=str(exc)),
            request,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=True,
        )
        return _error(
            500,
            "Internal Server Error",
            ErrorDetail(code="INTERNAL_ERROR", message=str(exc)),
            request,
        )

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "name": "Sourcewise API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "metrics": "/metrics",
            "status": "running",
        }

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sourcewise.api.main:create_app", factory=True, host="0.0.0.0", port=8000)
