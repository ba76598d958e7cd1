"""Process-wide logging setup for the service runtime."""

import logging
import sys

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def config_configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a single stdout console handler.

    Calling this more than once only updates the level; handlers are never
    duplicated.

    Args:
        level: Log level name such as `INFO` or `DEBUG`.

    Returns:
        None: Logging is configured as a side effect.

    Raises:
        ValueError: Raised when the level name is unknown.
    """

    resolved_level = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved_level, int):
        raise ValueError(f"unsupported log level={level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    if not root_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging initialized with level: %s", logging.getLevelName(resolved_level))
