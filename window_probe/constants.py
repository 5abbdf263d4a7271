"""Centralized constants for window-probe.

Attribute names and role/subrole vocabulary used by the accessibility
attribute source, plus the retry and classification defaults.
"""

from pathlib import Path
from typing import Final


class ConfigPaths:
    """Centralized configuration paths.

    Example:
        from .constants import ConfigPaths

        config = load_config(ConfigPaths.CONFIG_FILE)
    """

    HOME: Final[Path] = Path.home()
    CONFIG_DIR: Final[Path] = HOME / ".config" / "window-probe"

    CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.json"
    APPLICATIONS_FILE: Final[Path] = CONFIG_DIR / "applications.json"


# Retry budget. The transport's own per-call timeout is a few seconds, so a
# couple of retries normally suffice within this ceiling.
DEFAULT_GLOBAL_TIMEOUT_SECONDS: Final[float] = 120.0
DEFAULT_RETRY_BACKOFF_MS: Final[int] = 10
# Added on top of the global timeout for the per-call messaging timeout so a
# single call never triggers an extra retry.
DEFAULT_MESSAGING_TIMEOUT_MARGIN_SECONDS: Final[float] = 5.0

# Environment overrides
ENV_GLOBAL_TIMEOUT: Final[str] = "WINDOW_PROBE_GLOBAL_TIMEOUT"
ENV_RETRY_BACKOFF_MS: Final[str] = "WINDOW_PROBE_RETRY_BACKOFF_MS"
ENV_LOG_LEVEL: Final[str] = "LOG_LEVEL"

# Classification defaults
NORMAL_WINDOW_LEVEL: Final[int] = 0
MIN_WINDOW_DIMENSION: Final[float] = 100.0


class Attribute:
    """Attribute names understood by the attribute source."""

    WINDOW_ID: Final[str] = "_AXWindowID"
    PID: Final[str] = "_AXPid"
    LEVEL: Final[str] = "_CGWindowLevel"
    POSITION: Final[str] = "AXPosition"
    SIZE: Final[str] = "AXSize"
    TITLE: Final[str] = "AXTitle"
    ROLE: Final[str] = "AXRole"
    SUBROLE: Final[str] = "AXSubrole"
    PARENT: Final[str] = "AXParent"
    CHILDREN: Final[str] = "AXChildren"
    WINDOWS: Final[str] = "AXWindows"
    FOCUSED_WINDOW: Final[str] = "AXFocusedWindow"
    CLOSE_BUTTON: Final[str] = "AXCloseButton"
    MINIMIZED: Final[str] = "AXMinimized"
    FULLSCREEN: Final[str] = "AXFullScreen"
    IS_APPLICATION_RUNNING: Final[str] = "AXIsApplicationRunning"


class Role:
    WINDOW: Final[str] = "AXWindow"


class Subrole:
    STANDARD_WINDOW: Final[str] = "AXStandardWindow"
    DIALOG: Final[str] = "AXDialog"
    FLOATING_WINDOW: Final[str] = "AXFloatingWindow"
    SYSTEM_DIALOG: Final[str] = "AXSystemDialog"
    UNKNOWN: Final[str] = "AXUnknown"


# Subroles that mark a regular window on the default path
STANDARD_SUBROLES: Final[frozenset[str]] = frozenset({Subrole.STANDARD_WINDOW, Subrole.DIALOG})


class Classification:
    """Application classifications provided by the application registry."""

    ANDROID_EMULATOR: Final[str] = "android-emulator"


# Executable path fragment identifying the Android emulator process
ANDROID_EMULATOR_EXECUTABLE_MARKER: Final[str] = "qemu-system"
