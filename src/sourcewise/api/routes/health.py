"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends

from sourcewise import __version__
from sourcewise.data.interfaces import IMarketDataService, IRFQStore, ISupplierDirectory
from sourcewise.engine import SourcingEngine
from sourcewise.infrastructure.fallback import CircuitState

from ..schemas import HealthResponse, ReadinessResponse, ServiceHealth
from .deps import get_engine

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(engine: SourcingEngine = Depends(get_engine)) -> HealthResponse:
    """
    Health check endpoint.

    Reports collaborator wiring and open circuit breakers. An open breaker
    means a collaborator is currently answered by fallbacks.
    """
    services = []
    overall_status = "healthy"

    collaborators = engine.collaborators
    for name, component, protocol in (
        ("supplier_directory", collaborators.directory, ISupplierDirectory),
        ("market_data", collaborators.market_data, IMarketDataService),
        ("rfq_store", collaborators.rfq_store, IRFQStore),
    ):
        healthy = isinstance(component, protocol)
        services.append(
            ServiceHealth(
                name=name,
                status="healthy" if healthy else "unhealthy",
                message=type(component).__name__,
            )
        )
        if not healthy:
            overall_status = "degraded"

    for call, breaker in engine.guard.circuit_breakers().items():
        if breaker.state != CircuitState.CLOSED:
            services.append(
                ServiceHealth(
                    name=call,
                    status="degraded",
                    message=f"circuit {breaker.state.value}",
                )
            )
            overall_status = "degraded"

    return HealthResponse(
        status=overall_status, version=__version__, timestamp=datetime.now(), services=services
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(engine: SourcingEngine = Depends(get_engine)) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Used by Kubernetes/load balancers for traffic routing.
    """
    checks = {
        "policy": sum(engine.policy.matching.weights.model_dump().values()) > 0,
        "collaborators": all(
            c is not None
            for c in (
                engine.collaborators.directory,
                engine.collaborators.market_data,
                engine.collaborators.rfq_store,
            )
        ),
    }
    return ReadinessResponse(ready=all(checks.values()), checks=checks)


@router.get("/live")
async def liveness_check() -> dict:
    """
    Liveness check endpoint.

    Used by Kubernetes for pod restarts.
    """
    return {"status": "alive", "timestamp": datetime.now().isoformat()}
