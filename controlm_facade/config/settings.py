"""Typed runtime settings with dotenv support and startup validation."""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and scheduler integration.

    Environment variable names map directly to field names in uppercase.
    Example: `controlm_api_base_url` reads from `CONTROLM_API_BASE_URL`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        controlm_api_base_url: Base URL of the external Control-M API.
        controlm_request_timeout_seconds: Timeout applied to every remote scheduler call.
        controlm_mock_enabled: Whether the in-process mock scheduler replaces the HTTP adapter.
        controlm_mock_latency_seconds: Simulated latency for mock scheduler submissions.
        controlm_cancel_reason: Reason text forwarded with remote cancel requests.
        job_log_max_entries: Per-execution log retention limit.
        log_level: Application log level name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8080, ge=1, le=65535)
    controlm_api_base_url: str = Field(default="http://localhost:8090", min_length=1)
    controlm_request_timeout_seconds: float = Field(default=10.0, gt=0)
    controlm_mock_enabled: bool = Field(default=False)
    controlm_mock_latency_seconds: float = Field(default=0.0, ge=0)
    controlm_cancel_reason: str = Field(default="User requested cancellation", min_length=1)
    job_log_max_entries: int = Field(default=1000, ge=1)
    log_level: str = Field(default="INFO")

    @field_validator("controlm_api_base_url", "controlm_cancel_reason")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_level = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized_level), int):
            raise ValueError(f"unsupported log_level={value}")
        return normalized_level


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
