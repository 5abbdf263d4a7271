"""
Services for window-probe.

- retry_scheduler: retrying executor for attribute source calls
- attribute_reader: named attribute queries on an attribute source
- application_registry: owning application lookups
- window_classifier: rule-table window classification
- snapshot_builder: assembles snapshots through the scheduler and classifies them
"""

from .application_registry import (
    ApplicationRegistry,
    StaticApplicationRegistry,
    load_application_registry,
)
from .attribute_reader import AttributeReader, AttributeSource
from .retry_scheduler import (
    BatchGroup,
    OperationState,
    RetryScheduler,
    ScheduledOperation,
    get_scheduler,
    schedule_retryable,
)
from .snapshot_builder import SnapshotBuilder
from .window_classifier import WindowClassifier, classify_window, is_actual_window

__all__ = [
    "ApplicationRegistry",
    "StaticApplicationRegistry",
    "load_application_registry",
    "AttributeReader",
    "AttributeSource",
    "BatchGroup",
    "OperationState",
    "RetryScheduler",
    "ScheduledOperation",
    "get_scheduler",
    "schedule_retryable",
    "SnapshotBuilder",
    "WindowClassifier",
    "classify_window",
    "is_actual_window",
]
