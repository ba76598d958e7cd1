"""FastAPI application factory for the job orchestration facade.

This module composes the health, job and batch routers around injected
services so tests can assemble the application with stubs.
"""

from fastapi import FastAPI

from controlm_facade.adapters import SchedulerClientPort
from controlm_facade.config import AppSettings
from controlm_facade.jobs import BatchCoordinatorPort, JobOrchestratorPort
from controlm_facade.store import ExecutionStorePort

from .routers import api_create_batch_router, api_create_health_router, api_create_jobs_router


def create_api_application(
    settings: AppSettings,
    scheduler_client: SchedulerClientPort,
    execution_store: ExecutionStorePort,
    orchestrator: JobOrchestratorPort,
    batch_coordinator: BatchCoordinatorPort,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        scheduler_client: External scheduler adapter reported by health endpoints.
        execution_store: Execution store used for health counters.
        orchestrator: Job orchestrator for execution lifecycle endpoints.
        batch_coordinator: Batch coordinator for batch start endpoint.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        RuntimeError: Raised if application initialization fails.
    """
    application = FastAPI(title="Control-M Job Facade")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal foundation response for bootstrap verification.

        Returns:
            dict[str, str]: Minimal response for API framework verification.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "controlm-facade",
            "status": "foundation-ready",
            "environment": settings.environment_name,
        }

    application.include_router(
        api_create_health_router(scheduler_client=scheduler_client, execution_store=execution_store)
    )
    application.include_router(api_create_jobs_router(orchestrator=orchestrator))
    application.include_router(api_create_batch_router(batch_coordinator=batch_coordinator))

    return application
