"""
window-probe

Decides whether accessibility elements are real, user-facing windows.

This package provides:
- A retrying executor for attribute queries against a busy attribute source
- A rule-table window classifier with per-application quirks
- Snapshot assembly composing the two
- A diagnostic CLI (window-probe)
"""

__version__ = "1.0.0"

from .models import WindowAttributes, Size, AttributeResult, AttributeStatus
from .services import (
    BatchGroup,
    RetryScheduler,
    SnapshotBuilder,
    WindowClassifier,
    classify_window,
    is_actual_window,
    schedule_retryable,
)

__all__ = [
    "WindowAttributes",
    "Size",
    "AttributeResult",
    "AttributeStatus",
    "BatchGroup",
    "RetryScheduler",
    "SnapshotBuilder",
    "WindowClassifier",
    "classify_window",
    "is_actual_window",
    "schedule_retryable",
]
