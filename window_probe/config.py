"""Configuration loader for window-probe.

The global retry timeout is a process-wide value: it is set once at process
start (explicitly via configure() or lazily from file/environment on the
first get_config()) and is read-only afterwards.
"""

import json
import logging
import os
import sys
import threading
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    ConfigPaths,
    DEFAULT_GLOBAL_TIMEOUT_SECONDS,
    DEFAULT_MESSAGING_TIMEOUT_MARGIN_SECONDS,
    DEFAULT_RETRY_BACKOFF_MS,
    ENV_GLOBAL_TIMEOUT,
    ENV_LOG_LEVEL,
    ENV_RETRY_BACKOFF_MS,
)
from .errors import ConfigError, ErrorCode

logger = logging.getLogger(__name__)


class ProbeConfig(BaseModel):
    """Effective window-probe configuration.

    Attributes:
        global_timeout_seconds: Total retry budget for one scheduled operation
        retry_backoff_ms: Fixed delay between two attempts
        messaging_timeout_margin_seconds: Added to the global timeout to derive
            the per-call messaging timeout of the transport
    """

    model_config = ConfigDict(frozen=True)

    global_timeout_seconds: float = Field(DEFAULT_GLOBAL_TIMEOUT_SECONDS, gt=0)
    retry_backoff_ms: int = Field(DEFAULT_RETRY_BACKOFF_MS, gt=0)
    messaging_timeout_margin_seconds: float = Field(DEFAULT_MESSAGING_TIMEOUT_MARGIN_SECONDS, ge=0)

    @property
    def retry_backoff_seconds(self) -> float:
        return self.retry_backoff_ms / 1000.0

    @property
    def messaging_timeout_seconds(self) -> float:
        """Per-call timeout the transport should use.

        Kept above the global timeout so a single slow call is never cut
        short and retried while the retry budget is still running.
        """
        return self.global_timeout_seconds + self.messaging_timeout_margin_seconds


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ProbeConfig:
    """Load configuration from defaults, a JSON file and the environment.

    Later sources win: defaults < config file < environment.

    Args:
        config_file: Path to config.json (default: ConfigPaths.CONFIG_FILE)
        environ: Environment mapping (default: os.environ)

    Returns:
        Frozen ProbeConfig

    Raises:
        ConfigError: If a value is present but out of range
    """
    config_file = config_file if config_file is not None else ConfigPaths.CONFIG_FILE
    environ = environ if environ is not None else os.environ

    data: dict = {}

    if config_file.exists():
        try:
            with open(config_file) as f:
                file_data = json.load(f)
            if isinstance(file_data, dict):
                data.update(file_data)
                logger.debug(f"Loaded configuration from {config_file}")
            else:
                logger.error(f"Ignoring {config_file}: top-level value must be an object")
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load configuration from {config_file}: {e}")
            logger.warning("Using default configuration")
    else:
        logger.debug(f"Config file does not exist: {config_file}, using defaults")

    if ENV_GLOBAL_TIMEOUT in environ:
        data["global_timeout_seconds"] = environ[ENV_GLOBAL_TIMEOUT]
    if ENV_RETRY_BACKOFF_MS in environ:
        data["retry_backoff_ms"] = environ[ENV_RETRY_BACKOFF_MS]

    try:
        return ProbeConfig(**data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid window-probe configuration: {e.error_count()} error(s)",
            suggestion=f"Check {config_file} and the {ENV_GLOBAL_TIMEOUT}/{ENV_RETRY_BACKOFF_MS} variables",
            context={"errors": [err["msg"] for err in e.errors()]},
        ) from e


_config_lock = threading.Lock()
_active_config: Optional[ProbeConfig] = None


def configure(config: ProbeConfig) -> ProbeConfig:
    """Set the process-wide configuration.

    Must be called before anything reads the configuration.

    Raises:
        ConfigError: If the configuration has already been read or set
    """
    global _active_config
    with _config_lock:
        if _active_config is not None:
            raise ConfigError(
                "Configuration is read-only after process start",
                code=ErrorCode.CONFIG_ALREADY_FROZEN,
                suggestion="Call configure() once, before scheduling any operation",
            )
        _active_config = config
        logger.info(
            f"Configured global timeout={config.global_timeout_seconds}s, "
            f"backoff={config.retry_backoff_ms}ms"
        )
        return config


def get_config() -> ProbeConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _active_config
    with _config_lock:
        if _active_config is None:
            _active_config = load_config()
        return _active_config


def reset_config() -> None:
    """Forget the process-wide configuration. Intended for tests."""
    global _active_config
    with _config_lock:
        _active_config = None


_log_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Setup logging to stderr."""
    log_level = (level or os.environ.get(ENV_LOG_LEVEL, "INFO")).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    global _log_handler
    if _log_handler is not None:
        return

    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        "%(levelname)s [%(name)s] %(message)s"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    _log_handler = handler

    logger.debug(f"Logging configured: level={log_level}")
