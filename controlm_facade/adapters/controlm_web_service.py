"""Control-M REST API adapter implementation for job submission, status and cancel."""

from __future__ import annotations

import json
from typing import Any, Final, Mapping
from urllib.parse import quote

import httpx

from .controlm_errors import SchedulerConnectionError, SchedulerRequestError, SchedulerTimeoutError
from .interfaces import REMOTE_JOB_STATUSES, SchedulerClientPort, SchedulerJobStatus, SchedulerSubmitResult


class ControlMWebServiceAdapter(SchedulerClientPort):
    """Adapter implementation for the Control-M `jobs/submit`, `status` and `cancel` endpoints."""

    _USER_AGENT: Final[str] = "controlm-facade/1.0 (Python/httpx)"
    _SUBMIT_PATH: Final[str] = "/control-m/jobs/submit"
    _STATUS_PATH_TEMPLATE: Final[str] = "/control-m/jobs/{external_job_id}/status"
    _CANCEL_PATH_TEMPLATE: Final[str] = "/control-m/jobs/{external_job_id}/cancel"

    def __init__(
        self,
        base_url: str,
        request_timeout_seconds: float = 10.0,
        http_client: httpx.Client | None = None,
    ):
        """Initialize Control-M REST adapter.

        Args:
            base_url: Base endpoint URL for the Control-M API.
            request_timeout_seconds: Timeout applied to connect, read and write phases.
            http_client: Optional preconfigured client, mainly for transport injection in tests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._base_url = normalized_base_url.rstrip("/")
        self._request_timeout_seconds = request_timeout_seconds
        self._http_client = http_client or httpx.Client(
            timeout=httpx.Timeout(request_timeout_seconds),
            headers={"User-Agent": self._USER_AGENT, "Accept": "application/json"},
        )

    def adapter_source_name(self) -> str:
        """Return stable adapter source label.

        Returns:
            str: Source identifier including the target base URL.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return f"controlm_web_service:{self._base_url}"

    def adapter_submit_job(self, job_name: str, parameters: Mapping[str, Any]) -> SchedulerSubmitResult:
        """Submit one job and return the remote job identity.

        Args:
            job_name: Job name known to Control-M.
            parameters: Caller parameter mapping; omitted from the request when empty.

        Returns:
            SchedulerSubmitResult: Remote job id and optional duration estimate.

        Raises:
            SchedulerConnectionError: Raised for network and non-success HTTP status.
            SchedulerTimeoutError: Raised when the request exceeds the timeout.
            SchedulerRequestError: Raised when the response does not carry a job id.
        """

        normalized_job_name = job_name.strip()
        if not normalized_job_name:
            raise ValueError("job_name must not be blank")

        request_body: dict[str, object] = {"jobName": normalized_job_name}
        if parameters:
            request_body["parameters"] = dict(parameters)

        response_body = self._adapter_http_request(method="POST", path=self._SUBMIT_PATH, json_body=request_body)
        external_job_id = str(response_body.get("controlMJobId") or "").strip()
        if not external_job_id:
            raise SchedulerRequestError("Control-M submit response missing controlMJobId")

        estimated_duration = response_body.get("estimatedDuration")
        return SchedulerSubmitResult(
            external_job_id=external_job_id,
            estimated_duration=str(estimated_duration) if estimated_duration is not None else None,
        )

    def adapter_job_status(self, external_job_id: str) -> SchedulerJobStatus:
        """Fetch and normalize the remote status of one job.

        Args:
            external_job_id: Remote Control-M job id.

        Returns:
            SchedulerJobStatus: Status payload with upper-cased status value.

        Raises:
            SchedulerConnectionError: Raised for network and non-success HTTP status.
            SchedulerTimeoutError: Raised when the request exceeds the timeout.
            SchedulerRequestError: Raised when the status value is missing or unknown.
        """

        normalized_job_id = self._adapter_validate_job_id(external_job_id)
        response_body = self._adapter_http_request(
            method="GET",
            path=self._STATUS_PATH_TEMPLATE.format(external_job_id=quote(normalized_job_id, safe="")),
        )

        status_value = str(response_body.get("status") or "").strip().upper()
        if status_value not in REMOTE_JOB_STATUSES:
            raise SchedulerRequestError(
                f"Control-M status response has unsupported status={status_value or 'MISSING'} "
                f"for job={normalized_job_id}"
            )

        return SchedulerJobStatus(
            external_job_id=normalized_job_id,
            status=status_value,
            started_at=self._adapter_optional_text(response_body.get("startTime")),
            ended_at=self._adapter_optional_text(response_body.get("endTime")),
            output=self._adapter_optional_text(response_body.get("output")),
        )

    def adapter_cancel_job(self, external_job_id: str, reason: str) -> None:
        """Send one remote cancel request.

        Args:
            external_job_id: Remote Control-M job id.
            reason: Cancellation reason forwarded to Control-M.

        Returns:
            None: Any 2xx response is treated as acknowledgement.

        Raises:
            SchedulerConnectionError: Raised for network and non-success HTTP status.
            SchedulerTimeoutError: Raised when the request exceeds the timeout.
        """

        normalized_job_id = self._adapter_validate_job_id(external_job_id)
        self._adapter_http_request(
            method="POST",
            path=self._CANCEL_PATH_TEMPLATE.format(external_job_id=quote(normalized_job_id, safe="")),
            json_body={"reason": reason},
            require_body=False,
        )

    def adapter_close(self) -> None:
        """Release the underlying HTTP connection pool."""

        self._http_client.close()

    def _adapter_http_request(
        self,
        method: str,
        path: str,
        json_body: dict[str, object] | None = None,
        require_body: bool = True,
    ) -> dict[str, Any]:
        """Execute one HTTP request and return the decoded JSON object body.

        Args:
            method: HTTP method.
            path: Endpoint path relative to the base URL.
            json_body: Optional JSON request body.
            require_body: Whether an empty response body is a contract failure.

        Returns:
            dict[str, Any]: Decoded JSON object, empty when no body was returned and none was required.

        Raises:
            SchedulerConnectionError: Raised for network and non-success HTTP status.
            SchedulerTimeoutError: Raised when the request exceeds the timeout.
            SchedulerRequestError: Raised when the body is not a JSON object.
        """

        url = f"{self._base_url}{path}"
        try:
            response = self._http_client.request(
                method,
                url,
                json=json_body,
                timeout=self._request_timeout_seconds,
            )
        except httpx.TimeoutException as error:
            raise SchedulerTimeoutError(f"Control-M request timed out: {method} {path}") from error
        except httpx.HTTPError as error:
            raise SchedulerConnectionError(f"Control-M request failed: {method} {path}") from error

        if response.status_code >= 400:
            raise SchedulerConnectionError(
                f"Control-M upstream returned HTTP {response.status_code} for {method} {path}",
                status_code=response.status_code,
            )

        if not response.content:
            if require_body:
                raise SchedulerRequestError(f"Control-M returned an empty body for {method} {path}")
            return {}

        try:
            decoded_body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            if not require_body:
                return {}
            raise SchedulerRequestError(f"Control-M returned a non-JSON body for {method} {path}") from error

        if not isinstance(decoded_body, dict):
            if not require_body:
                return {}
            raise SchedulerRequestError(f"Control-M returned a non-object body for {method} {path}")
        return decoded_body

    def _adapter_validate_job_id(self, external_job_id: str) -> str:
        normalized_job_id = (external_job_id or "").strip()
        if not normalized_job_id:
            raise ValueError("external_job_id must not be blank")
        return normalized_job_id

    def _adapter_optional_text(self, value: object) -> str | None:
        if value is None:
            return None
        text_value = str(value).strip()
        return text_value or None
