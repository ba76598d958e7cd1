"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import FastAPI

from controlm_facade.adapters import ControlMWebServiceAdapter, MockControlMScheduler, SchedulerClientPort
from controlm_facade.api import create_api_application
from controlm_facade.config import AppSettings, config_load_settings
from controlm_facade.jobs import BatchJobCoordinator, ControlMJobOrchestrator, JobOrchestratorConfig
from controlm_facade.store import InMemoryExecutionLog, InMemoryExecutionStore


@dataclass(frozen=True)
class BootstrapServices:
    """Wired runtime services shared by API and command-line surfaces.

    Attributes:
        scheduler_client: External scheduler adapter.
        execution_store: Execution record store.
        execution_log: Execution log store.
        orchestrator: Execution lifecycle orchestrator.
        batch_coordinator: Batch fan-out coordinator.
    """

    scheduler_client: SchedulerClientPort
    execution_store: InMemoryExecutionStore
    execution_log: InMemoryExecutionLog
    orchestrator: ControlMJobOrchestrator
    batch_coordinator: BatchJobCoordinator


def bootstrap_create_scheduler_client(settings: AppSettings) -> SchedulerClientPort:
    """Build the configured scheduler adapter.

    Args:
        settings: Validated runtime settings.

    Returns:
        SchedulerClientPort: Mock scheduler when enabled, HTTP adapter otherwise.

    Raises:
        ValueError: Raised when adapter configuration is invalid.
    """

    if settings.controlm_mock_enabled:
        return MockControlMScheduler(latency_seconds=settings.controlm_mock_latency_seconds)
    return ControlMWebServiceAdapter(
        base_url=settings.controlm_api_base_url,
        request_timeout_seconds=settings.controlm_request_timeout_seconds,
    )


def bootstrap_create_services(settings: AppSettings) -> BootstrapServices:
    """Assemble store, log, adapter, orchestrator and batch coordinator.

    Args:
        settings: Validated runtime settings.

    Returns:
        BootstrapServices: Independent service graph; nothing is shared between calls.

    Raises:
        ValueError: Raised when configuration values are invalid.
    """

    scheduler_client = bootstrap_create_scheduler_client(settings)
    execution_store = InMemoryExecutionStore()
    execution_log = InMemoryExecutionLog(max_entries=settings.job_log_max_entries)
    orchestrator = ControlMJobOrchestrator(
        execution_store=execution_store,
        execution_log=execution_log,
        scheduler_client=scheduler_client,
        config=JobOrchestratorConfig(cancel_reason=settings.controlm_cancel_reason),
    )
    return BootstrapServices(
        scheduler_client=scheduler_client,
        execution_store=execution_store,
        execution_log=execution_log,
        orchestrator=orchestrator,
        batch_coordinator=BatchJobCoordinator(orchestrator=orchestrator),
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional preloaded settings; loaded from environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    services = bootstrap_create_services(resolved_settings)
    return create_api_application(
        settings=resolved_settings,
        scheduler_client=services.scheduler_client,
        execution_store=services.execution_store,
        orchestrator=services.orchestrator,
        batch_coordinator=services.batch_coordinator,
    )
