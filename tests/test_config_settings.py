"""Tests for runtime settings loading and logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from controlm_facade.config import (
    AppSettings,
    SettingsLoadError,
    config_configure_logging,
    config_load_settings,
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test outside the project root so no dotenv file is read.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Per-test temporary directory.

    Returns:
        None: Fixture only changes process state.

    Raises:
        RuntimeError: This fixture does not raise runtime errors.
    """

    monkeypatch.chdir(tmp_path)
    for variable_name in (
        "CONTROLM_API_BASE_URL",
        "CONTROLM_MOCK_ENABLED",
        "CONTROLM_REQUEST_TIMEOUT_SECONDS",
        "JOB_LOG_MAX_ENTRIES",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(variable_name, raising=False)


def test_config_load_settings_uses_defaults() -> None:
    settings = config_load_settings()

    assert settings.application_port == 8080
    assert settings.controlm_api_base_url == "http://localhost:8090"
    assert settings.controlm_request_timeout_seconds == 10.0
    assert settings.controlm_mock_enabled is False
    assert settings.job_log_max_entries == 1000
    assert settings.log_level == "INFO"


def test_config_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read uppercase environment variables and normalize values.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate environment mapping.

    Raises:
        AssertionError: Raised when environment values are not applied.
    """

    monkeypatch.setenv("CONTROLM_API_BASE_URL", "  https://controlm.example.test/api  ")
    monkeypatch.setenv("CONTROLM_MOCK_ENABLED", "true")
    monkeypatch.setenv("JOB_LOG_MAX_ENTRIES", "25")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = config_load_settings()

    assert settings.controlm_api_base_url == "https://controlm.example.test/api"
    assert settings.controlm_mock_enabled is True
    assert settings.job_log_max_entries == 25
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("variable_name", "variable_value"),
    [
        ("CONTROLM_REQUEST_TIMEOUT_SECONDS", "0"),
        ("JOB_LOG_MAX_ENTRIES", "0"),
        ("LOG_LEVEL", "chatty"),
        ("CONTROLM_API_BASE_URL", "   "),
    ],
)
def test_config_load_settings_wraps_validation_errors(
    monkeypatch: pytest.MonkeyPatch,
    variable_name: str,
    variable_value: str,
) -> None:
    monkeypatch.setenv(variable_name, variable_value)

    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings()


def test_config_configure_logging_does_not_duplicate_handlers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Install one console handler and only update level on repeated calls.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate idempotent logging setup.

    Raises:
        AssertionError: Raised when handlers are duplicated.
    """

    root_logger = logging.getLogger()
    monkeypatch.setattr(root_logger, "handlers", [])
    monkeypatch.setattr(root_logger, "level", root_logger.level)

    config_configure_logging("info")
    config_configure_logging("DEBUG")

    assert len(root_logger.handlers) == 1
    assert root_logger.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_config_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="unsupported log level"):
        config_configure_logging("chatty")


def test_config_settings_accept_explicit_values() -> None:
    settings = AppSettings(controlm_cancel_reason="  Operator abort  ", application_port=9000)

    assert settings.controlm_cancel_reason == "Operator abort"
    assert settings.application_port == 9000
