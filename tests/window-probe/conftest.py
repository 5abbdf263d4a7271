"""
Pytest configuration and fixtures for window-probe tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fixtures.scripted_source import ScriptedAttributeSource  # noqa: E402

from window_probe.config import reset_config  # noqa: E402
from window_probe.constants import Attribute  # noqa: E402
from window_probe.models.attributes import Size, WindowAttributes  # noqa: E402
from window_probe.services.retry_scheduler import RetryScheduler  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config():
    """Every test starts without a frozen process-wide configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def scheduler():
    """Scheduler with a short global timeout and the standard 10ms backoff."""
    with RetryScheduler(global_timeout=1.0, backoff_seconds=0.01, name="test-attribute-calls") as s:
        yield s


@pytest.fixture
def standard_window():
    """Snapshot of a plain, regular application window."""
    return WindowAttributes(
        window_id=42,
        size=Size(width=800, height=600),
        level=0,
        title="Document",
        subrole="AXStandardWindow",
        role="AXWindow",
        owner_app_id="com.example.anyapp",
        owner_is_running=True,
    )


@pytest.fixture
def make_attrs(standard_window):
    """Factory deriving snapshots from the standard window profile."""
    def _make(**overrides) -> WindowAttributes:
        return WindowAttributes.model_validate({**standard_window.model_dump(), **overrides})
    return _make


@pytest.fixture
def window_source():
    """Attribute source for a regular window whose owner has pid 4242."""
    return ScriptedAttributeSource({
        Attribute.WINDOW_ID: 42,
        Attribute.SIZE: (800, 600),
        Attribute.LEVEL: 0,
        Attribute.TITLE: "Document",
        Attribute.SUBROLE: "AXStandardWindow",
        Attribute.ROLE: "AXWindow",
        Attribute.PID: 4242,
    })
