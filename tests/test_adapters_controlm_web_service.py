"""Regression tests for Control-M REST adapter request mapping and error handling."""

from __future__ import annotations

import json

import httpx
import pytest

from controlm_facade.adapters import (
    ControlMWebServiceAdapter,
    SchedulerConnectionError,
    SchedulerRequestError,
    SchedulerTimeoutError,
)

_BASE_URL = "https://controlm.example.test/api"


def _build_adapter(handler) -> ControlMWebServiceAdapter:
    """Build adapter backed by an in-memory httpx transport.

    Args:
        handler: Callable mapping `httpx.Request` to `httpx.Response`.

    Returns:
        ControlMWebServiceAdapter: Adapter wired to the mock transport.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return ControlMWebServiceAdapter(
        base_url=_BASE_URL,
        request_timeout_seconds=2.0,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_adapters_controlm_submit_posts_job_and_parameters() -> None:
    """Post job name and parameters and map the remote id.

    Returns:
        None: Assertions validate request and response mapping.

    Raises:
        AssertionError: Raised when mapping is incorrect.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"controlMJobId": "CTM_JOB_42", "estimatedDuration": "5 minutes"})

    adapter = _build_adapter(_handler)
    submit_result = adapter.adapter_submit_job("reportJob", {"region": "eu"})

    assert submit_result.external_job_id == "CTM_JOB_42"
    assert submit_result.estimated_duration == "5 minutes"
    assert captured_requests[0].method == "POST"
    assert str(captured_requests[0].url) == f"{_BASE_URL}/control-m/jobs/submit"
    assert json.loads(captured_requests[0].content) == {"jobName": "reportJob", "parameters": {"region": "eu"}}


def test_adapters_controlm_submit_omits_empty_parameters() -> None:
    captured_bodies: list[dict[str, object]] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"controlMJobId": "CTM_JOB_1"})

    submit_result = _build_adapter(_handler).adapter_submit_job("quicktest", {})

    assert captured_bodies == [{"jobName": "quicktest"}]
    assert submit_result.estimated_duration is None


def test_adapters_controlm_submit_missing_job_id_raises_request_error() -> None:
    adapter = _build_adapter(lambda request: httpx.Response(200, json={"status": "SUBMITTED"}))

    with pytest.raises(SchedulerRequestError, match="controlMJobId"):
        adapter.adapter_submit_job("reportJob", {})


def test_adapters_controlm_http_error_status_raises_connection_error() -> None:
    """Map HTTP 5xx responses to connection errors with status code.

    Returns:
        None: Assertions validate HTTP status mapping.

    Raises:
        AssertionError: Raised when HTTP status mapping is incorrect.
    """

    adapter = _build_adapter(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(SchedulerConnectionError) as error_info:
        adapter.adapter_submit_job("reportJob", {})

    assert error_info.value.status_code == 503
    assert isinstance(error_info.value, ConnectionError)


def test_adapters_controlm_timeout_raises_timeout_error() -> None:
    """Map transport timeouts to the adapter timeout error.

    Returns:
        None: Assertions validate timeout mapping behavior.

    Raises:
        AssertionError: Raised when timeout mapping is incorrect.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    adapter = _build_adapter(_handler)

    with pytest.raises(SchedulerTimeoutError, match="timed out"):
        adapter.adapter_job_status("CTM_JOB_1")


def test_adapters_controlm_transport_failure_raises_connection_error() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SchedulerConnectionError):
        _build_adapter(_handler).adapter_cancel_job("CTM_JOB_1", reason="stop")


def test_adapters_controlm_status_normalizes_remote_payload() -> None:
    """Upper-case status values and map optional timestamps.

    Returns:
        None: Assertions validate status normalization.

    Raises:
        AssertionError: Raised when normalization is incorrect.
    """

    captured_urls: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_urls.append(str(request.url))
        return httpx.Response(
            200,
            json={
                "controlMJobId": "CTM_JOB_1",
                "status": "success",
                "startTime": "2025-01-15T14:00:00Z",
                "endTime": "2025-01-15T14:05:00Z",
                "output": "Job completed successfully",
            },
        )

    job_status = _build_adapter(_handler).adapter_job_status("CTM_JOB_1")

    assert captured_urls == [f"{_BASE_URL}/control-m/jobs/CTM_JOB_1/status"]
    assert job_status.status == "SUCCESS"
    assert job_status.is_terminal
    assert job_status.ended_at == "2025-01-15T14:05:00Z"
    assert job_status.output == "Job completed successfully"


def test_adapters_controlm_status_unknown_value_raises_request_error() -> None:
    adapter = _build_adapter(lambda request: httpx.Response(200, json={"status": "ON_HOLD"}))

    with pytest.raises(SchedulerRequestError, match="ON_HOLD"):
        adapter.adapter_job_status("CTM_JOB_1")


def test_adapters_controlm_status_non_json_body_raises_request_error() -> None:
    adapter = _build_adapter(lambda request: httpx.Response(200, text="<html>gateway</html>"))

    with pytest.raises(SchedulerRequestError, match="non-JSON"):
        adapter.adapter_job_status("CTM_JOB_1")


def test_adapters_controlm_cancel_sends_reason_and_accepts_empty_body() -> None:
    """Post cancel reason and treat an empty 2xx response as acknowledgement.

    Returns:
        None: Assertions validate cancel request mapping.

    Raises:
        AssertionError: Raised when cancel mapping is incorrect.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(204)

    _build_adapter(_handler).adapter_cancel_job("CTM_JOB_9", reason="User requested cancellation")

    assert str(captured_requests[0].url) == f"{_BASE_URL}/control-m/jobs/CTM_JOB_9/cancel"
    assert json.loads(captured_requests[0].content) == {"reason": "User requested cancellation"}


def test_adapters_controlm_rejects_invalid_configuration() -> None:
    with pytest.raises(ValueError, match="base_url"):
        ControlMWebServiceAdapter(base_url="  ")
    with pytest.raises(ValueError, match="request_timeout_seconds"):
        ControlMWebServiceAdapter(base_url=_BASE_URL, request_timeout_seconds=0)


def test_adapters_controlm_source_name_includes_base_url() -> None:
    adapter = _build_adapter(lambda request: httpx.Response(200, json={}))

    assert adapter.adapter_source_name() == f"controlm_web_service:{_BASE_URL}"
