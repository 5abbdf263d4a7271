"""
Snapshot assembly: the call site that owns both a handle and a rule table.

Each attribute of a window is queried independently through RetryScheduler,
as one batch. Any query that ends up unsupported or timed out simply leaves
its field as None ("unknown") in the resulting snapshot.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

from ..constants import Classification
from ..models.application import RunningApplication, RunningState
from ..models.attributes import WindowAttributes
from ..models.rule import ClassificationVerdict
from .application_registry import ApplicationRegistry, classify_application
from .attribute_reader import AttributeReader, AttributeSource
from .retry_scheduler import BatchGroup, RetryScheduler, get_scheduler
from .window_classifier import WindowClassifier, default_classifier

logger = logging.getLogger(__name__)

# Registry classifications consulted for every owning application
REGISTRY_CLASSIFICATIONS = (Classification.ANDROID_EMULATOR,)

_SNAPSHOT_QUERIES: tuple[tuple[str, Callable[[AttributeReader], Any]], ...] = (
    ("window_id", AttributeReader.window_id),
    ("size", AttributeReader.size),
    ("level", AttributeReader.level),
    ("title", AttributeReader.title),
    ("subrole", AttributeReader.subrole),
    ("role", AttributeReader.role),
)


class SnapshotBuilder:
    """Builds WindowAttributes snapshots and classifies them.

    Example:
        >>> builder = SnapshotBuilder(source, registry)
        >>> builder.is_actual_window(handle)
        True
    """

    def __init__(
        self,
        source: AttributeSource,
        registry: Optional[ApplicationRegistry] = None,
        scheduler: Optional[RetryScheduler] = None,
        classifier: Optional[WindowClassifier] = None,
    ):
        """Initialize builder.

        Args:
            source: Attribute source to query
            registry: Application registry for owner lookups
            scheduler: Scheduler for the queries (default: shared scheduler)
            classifier: Classifier (default: default rule table)
        """
        self.source = source
        self.registry = registry
        self.scheduler = scheduler or get_scheduler()
        self.classifier = classifier or default_classifier()

    def build(
        self,
        handle: Any,
        app: Optional[RunningApplication] = None,
        timeout: Optional[float] = None,
        wait_timeout: Optional[float] = None,
    ) -> WindowAttributes:
        """Query every snapshot attribute of a window.

        Args:
            handle: Opaque window handle
            app: Owning application (looked up by pid via the registry if None)
            timeout: Retry budget per query (default: global timeout)
            wait_timeout: Maximum seconds to wait for the batch (default: no limit)

        Returns:
            Immutable snapshot; fields whose query failed are None

        Raises:
            Exception: Any fatal (non-retryable, non-unsupported) query error
        """
        reader = AttributeReader(self.source, handle)
        values: dict[str, Any] = {}
        lock = threading.Lock()
        batch = BatchGroup()

        queries = list(_SNAPSHOT_QUERIES)
        if app is None:
            queries.append(("pid", AttributeReader.pid))

        for field, query in queries:
            self.scheduler.schedule(
                self._store(values, lock, field, reader, query),
                timeout=timeout,
                batch=batch,
                name=f"{field} of {handle!r}",
            )

        if not batch.wait(wait_timeout):
            logger.warning(f"Snapshot of {handle!r} incomplete: {batch.pending} query(ies) still pending")

        with lock:
            snapshot = dict(values)

        pid = snapshot.pop("pid", None)
        if app is None and pid is not None and self.registry is not None:
            app = self.registry.application_for_pid(pid)
            if app is None:
                logger.debug(f"No registered application for pid {pid}")

        return WindowAttributes(**snapshot, **self._owner_fields(app))

    async def build_async(
        self,
        handle: Any,
        app: Optional[RunningApplication] = None,
        timeout: Optional[float] = None,
        wait_timeout: Optional[float] = None,
    ) -> WindowAttributes:
        """Asyncio variant of build(); the batch wait runs in a worker thread."""
        return await asyncio.to_thread(self.build, handle, app, timeout, wait_timeout)

    def classify(self, handle: Any, app: Optional[RunningApplication] = None) -> ClassificationVerdict:
        return self.classifier.classify(self.build(handle, app))

    def is_actual_window(self, handle: Any, app: Optional[RunningApplication] = None) -> bool:
        return self.classify(handle, app).is_window

    @staticmethod
    def _store(
        values: dict,
        lock: threading.Lock,
        field: str,
        reader: AttributeReader,
        query: Callable[[AttributeReader], Any],
    ) -> Callable[[], None]:
        def operation() -> None:
            value = query(reader)
            with lock:
                values[field] = value
        return operation

    def _owner_fields(self, app: Optional[RunningApplication]) -> dict:
        if app is None:
            return {}

        classifications = set(classify_application(app))
        is_running = app.is_running

        if self.registry is not None and app.bundle_id:
            state = self.registry.running_state(app.bundle_id)
            if state != RunningState.UNKNOWN:
                is_running = state in (RunningState.LAUNCHING, RunningState.RUNNING)
            for classification in REGISTRY_CLASSIFICATIONS:
                if self.registry.is_running_application_classified(app.bundle_id, classification):
                    classifications.add(classification)

        return {
            "owner_app_id": app.bundle_id,
            "owner_is_running": is_running,
            "owner_classifications": frozenset(classifications),
        }
