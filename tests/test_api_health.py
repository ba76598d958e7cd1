"""Tests for API health endpoint behavior.

These tests validate deterministic response behavior and execution counters
reported by the health endpoints.
"""

from fastapi.testclient import TestClient

from controlm_facade.adapters import ControlMWebServiceAdapter, MockControlMScheduler
from controlm_facade.api.application import create_api_application
from controlm_facade.bootstrap import (
    bootstrap_create_application,
    bootstrap_create_scheduler_client,
    bootstrap_create_services,
)
from controlm_facade.config import AppSettings


def _build_settings(**overrides: object) -> AppSettings:
    """Create test settings object.

    Args:
        overrides: Field overrides applied on top of test defaults.

    Returns:
        AppSettings: Deterministic test settings for API creation.

    Raises:
        ValueError: Raised by AppSettings when values are invalid.
    """

    values: dict[str, object] = {"environment_name": "test", "controlm_mock_enabled": True}
    values.update(overrides)
    return AppSettings(**values)


def test_api_health_reports_scheduler_and_execution_counters() -> None:
    """Return HTTP 200 with scheduler label and execution counts.

    Returns:
        None: Assertions validate response behavior.

    Raises:
        AssertionError: Raised when response does not match expected payload.
    """

    settings = _build_settings()
    services = bootstrap_create_services(settings)
    application = create_api_application(
        settings=settings,
        scheduler_client=services.scheduler_client,
        execution_store=services.execution_store,
        orchestrator=services.orchestrator,
        batch_coordinator=services.batch_coordinator,
    )
    client = TestClient(application)
    services.orchestrator.job_start("quickTest", execution_id="first")
    services.orchestrator.job_start("quickTest", execution_id="second")
    services.orchestrator.job_cancel("first")

    for path in ("/health", "/control-m/health"):
        response = client.get(path)

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["app"] == "up"
        assert response.json()["scheduler"] == "controlm_mock"
        assert response.json()["executions_tracked"] == 2
        assert response.json()["executions_running"] == 1


def test_api_foundation_index_reports_environment() -> None:
    client = TestClient(bootstrap_create_application(_build_settings(environment_name="staging")))

    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "service": "controlm-facade",
        "status": "foundation-ready",
        "environment": "staging",
    }


def test_bootstrap_selects_scheduler_adapter_from_settings() -> None:
    """Select the mock scheduler or the HTTP adapter from configuration.

    Returns:
        None: Assertions validate adapter selection.

    Raises:
        AssertionError: Raised when the wrong adapter is selected.
    """

    mock_client = bootstrap_create_scheduler_client(_build_settings())
    http_client = bootstrap_create_scheduler_client(
        _build_settings(controlm_mock_enabled=False, controlm_api_base_url="https://controlm.example.test/api")
    )

    assert isinstance(mock_client, MockControlMScheduler)
    assert isinstance(http_client, ControlMWebServiceAdapter)
    assert http_client.adapter_source_name() == "controlm_web_service:https://controlm.example.test/api"
    http_client.adapter_close()


def test_bootstrap_services_are_independent_between_calls() -> None:
    first_services = bootstrap_create_services(_build_settings())
    second_services = bootstrap_create_services(_build_settings())

    first_services.orchestrator.job_start("quickTest", execution_id="only-in-first")

    assert first_services.execution_store.store_contains("only-in-first")
    assert not second_services.execution_store.store_contains("only-in-first")
