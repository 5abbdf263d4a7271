"""
Pydantic models for window-probe.

- attributes: attribute query results and window snapshots
- application: running applications known to the application registry
- rule: classification rules and verdicts
"""

from .attributes import (
    AttributeResult,
    AttributeStatus,
    Point,
    Size,
    WindowAttributes,
)
from .application import RunningApplication, RunningState
from .rule import AppMatcher, ClassificationRule, ClassificationVerdict, RuleTier

__all__ = [
    "AttributeResult",
    "AttributeStatus",
    "Point",
    "Size",
    "WindowAttributes",
    "RunningApplication",
    "RunningState",
    "AppMatcher",
    "ClassificationRule",
    "ClassificationVerdict",
    "RuleTier",
]
