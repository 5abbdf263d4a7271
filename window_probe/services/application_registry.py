"""
Application registry: identity and running state of window owners.

The window classifier never queries the registry itself. Registry lookups
(running state, classifications such as "android emulator") are resolved
when a snapshot is assembled and carried on the WindowAttributes.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol, runtime_checkable

from pydantic import ValidationError

from ..constants import ANDROID_EMULATOR_EXECUTABLE_MARKER, Classification
from ..errors import ConfigError, ErrorCode
from ..models.application import RunningApplication, RunningState

logger = logging.getLogger(__name__)


@runtime_checkable
class ApplicationRegistry(Protocol):
    """Lookups on running applications."""

    def application_for_pid(self, pid: int) -> Optional[RunningApplication]:
        ...

    def is_running_application_classified(self, app_id: str, classification: str) -> bool:
        ...

    def running_state(self, app_id: str) -> RunningState:
        ...


def classify_application(app: RunningApplication) -> frozenset[str]:
    """Derive registry classifications from process properties."""
    classifications = set(app.classifications)
    if app.executable_path and ANDROID_EMULATOR_EXECUTABLE_MARKER in app.executable_path:
        classifications.add(Classification.ANDROID_EMULATOR)
    return frozenset(classifications)


class StaticApplicationRegistry:
    """In-memory registry over a fixed set of applications.

    Example:
        >>> registry = StaticApplicationRegistry([
        ...     RunningApplication(pid=42, bundle_id="com.valvesoftware.steam", name="Steam"),
        ... ])
        >>> registry.running_state("com.valvesoftware.steam")
        <RunningState.RUNNING: 'running'>
    """

    def __init__(self, applications: Iterable[RunningApplication] = ()):
        self._by_pid: dict[int, RunningApplication] = {}
        self._by_app_id: dict[str, RunningApplication] = {}
        for app in applications:
            self.add(app)

    def __len__(self) -> int:
        return len(self._by_pid)

    def add(self, app: RunningApplication) -> RunningApplication:
        """Register an application, filling in derived classifications."""
        classifications = classify_application(app)
        if classifications != app.classifications:
            app = app.model_copy(update={"classifications": classifications})

        self._by_pid[app.pid] = app
        if app.bundle_id:
            self._by_app_id[app.bundle_id] = app
        return app

    def application_for_pid(self, pid: int) -> Optional[RunningApplication]:
        return self._by_pid.get(pid)

    def application_for_id(self, app_id: str) -> Optional[RunningApplication]:
        return self._by_app_id.get(app_id)

    def is_running_application_classified(self, app_id: str, classification: str) -> bool:
        app = self._by_app_id.get(app_id)
        return app is not None and app.is_running and classification in app.classifications

    def running_state(self, app_id: str) -> RunningState:
        app = self._by_app_id.get(app_id)
        return app.state if app is not None else RunningState.UNKNOWN


def load_application_registry(path: Path) -> StaticApplicationRegistry:
    """Load a registry from a JSON list of applications.

    Args:
        path: Path to applications.json

    Returns:
        StaticApplicationRegistry (empty if the file does not exist)

    Raises:
        ConfigError: If the file is not valid JSON or an entry is invalid
    """
    if not path.exists():
        logger.info(f"Application registry file does not exist: {path}, using empty registry")
        return StaticApplicationRegistry()

    try:
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError("top-level value must be a list")
        applications = [RunningApplication(**entry) for entry in data]
    except (json.JSONDecodeError, ValidationError, ValueError, TypeError) as e:
        raise ConfigError(
            f"Failed to load application registry from {path}: {e}",
            code=ErrorCode.REGISTRY_LOAD_FAILED,
        ) from e

    registry = StaticApplicationRegistry(applications)
    logger.info(f"Loaded {len(registry)} application(s) from {path}")
    return registry
