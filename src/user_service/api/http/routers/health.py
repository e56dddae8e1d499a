"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.user_service.api.http.app_data import ApplicationDependencies
from src.user_service.api.http.deps import get_app_config, get_app_dependencies
from src.user_service.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 OK while the process runs, no dependency checks."""
    return {"status": "healthy", "service": "user-service"}


@router.get("/ready", response_model=None)
async def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    config: ConfigData = Depends(get_app_config),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 503 unless the database answers and the dispatcher is open."""
    checks: dict[str, Any] = {}
    all_healthy = True

    try:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "sqlite" if config.database.is_sqlite else "postgresql",
            "pool": app_deps.database_service.get_pool_status(),
        }
        if not db_healthy:
            all_healthy = False
    except Exception as e:
        checks["database"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    dispatcher = app_deps.dispatcher
    checks["dispatcher"] = {
        "status": "closed" if dispatcher.closed else "healthy",
        "delivered": dispatcher.delivered,
        "errors": dispatcher.get_error_counts(),
    }
    if dispatcher.closed:
        all_healthy = False

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)

    return response
