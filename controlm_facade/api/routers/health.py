"""Health endpoint router composition for app and scheduler integration status."""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from controlm_facade.adapters import SchedulerClientPort
from controlm_facade.domain import ExecutionStatus
from controlm_facade.store import ExecutionStorePort


def api_create_health_router(
    scheduler_client: SchedulerClientPort,
    execution_store: ExecutionStorePort,
) -> APIRouter:
    """Create health-check router with scheduler target and execution counts.

    Args:
        scheduler_client: Adapter whose source label is reported.
        execution_store: Store used for execution counters.

    Returns:
        APIRouter: Router exposing `/health` and `/control-m/health` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if scheduler_client is None:
        raise ValueError("scheduler_client must not be None")
    if execution_store is None:
        raise ValueError("execution_store must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    @router.get("/control-m/health")
    def api_health_status() -> JSONResponse:
        """Return application health and execution tracking counters.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: Raised if store counters cannot be read.
        """

        running_count = len(execution_store.store_list(status_filter=ExecutionStatus.RUNNING))
        payload = {
            "status": "ok",
            "app": "up",
            "service": "Control-M Integration",
            "scheduler": scheduler_client.adapter_source_name(),
            "executions_tracked": execution_store.store_count(),
            "executions_running": running_count,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
