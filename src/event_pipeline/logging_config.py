"""
Centralized logging configuration for the pipeline process.

This module provides a single setup_logging function that configures:
- Console output on stdout
- Optional file output to logs/{service_name}.log
- Fresh log file on each start unless LOG_APPEND=1
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional

from event_pipeline.config import ConfigurationError, env_str

# Thread-safe lock for logging configuration
_config_lock = threading.Lock()
_LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_NOISY_LOGGERS = ("aiohttp", "aiohttp.access", "aiohttp.client", "asyncio")


def _resolve_level(level: Optional[str]) -> int:
    name = (level or env_str("LOG_LEVEL", or_value="INFO")).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ConfigurationError.invalid_value("LOG_LEVEL", name, "Expected a standard logging level name")
    return resolved


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:
            logging.getLogger(__name__).debug("Handler close failed: %s", exc)
    logger.handlers = []


def _build_console_handler() -> logging.Handler:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    return console_handler


def _build_file_handler(service_name: str, logs_dir: Path) -> logging.Handler:
    logs_dir.mkdir(parents=True, exist_ok=True)
    file_mode = "a" if env_str("LOG_APPEND") == "1" else "w"
    file_handler = logging.FileHandler(logs_dir / f"{service_name}.log", mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    return file_handler


def _suppress_noisy_third_parties() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(
    service_name: Optional[str] = None,
    level: Optional[str] = None,
    logs_dir: Optional[Path] = None,
) -> None:
    """Configure root logging for the application.

    When ``service_name`` is given, records are also written to
    ``<logs_dir>/<service_name>.log`` (``logs/`` under the working directory by default).
    """

    with _config_lock:
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler())
        if service_name:
            root_logger.addHandler(_build_file_handler(service_name, logs_dir or Path.cwd() / "logs"))

        root_logger.setLevel(_resolve_level(level))
        _suppress_noisy_third_parties()


__all__ = ["setup_logging"]
