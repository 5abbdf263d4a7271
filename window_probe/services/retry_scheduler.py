"""
Retrying executor for attribute source calls.

The attribute source sits behind a busy system server which does not
distinguish "busy" from "gone": a call that times out may well succeed a
moment later. Operations are therefore retried on a fixed 10ms backoff until
they succeed or the global timeout elapses, at which point they are dropped
quietly (callers treat a missing attribute as "unknown").

All attempts run on one dedicated background thread hosting an asyncio event
loop. Retries are re-enqueued with loop.call_later(), so a retry chain never
grows the call stack and never blocks the caller's thread.

Example:
    >>> scheduler = RetryScheduler(global_timeout=5.0)
    >>> batch = BatchGroup()
    >>> values = {}
    >>> scheduler.schedule(lambda: values.update(title=reader.title()), batch=batch)
    >>> batch.wait()
    True
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
import time
from enum import Enum
from typing import Awaitable, Callable, Iterable, Optional, Union

from ..config import get_config
from ..errors import (
    DeadlineExceededError,
    MalformedRequestError,
    TransientFailureError,
    UnsupportedAttributeError,
)

logger = logging.getLogger(__name__)

Operation = Callable[[], Union[None, Awaitable[None]]]
CompletionCallback = Callable[[], None]


class OperationState(str, Enum):
    """Lifecycle of a scheduled operation.

    PENDING -> SUCCEEDED | DROPPED_UNSUPPORTED | FAILED
    PENDING -> RETRYING -> PENDING (while within the timeout)
    PENDING -> DROPPED_TIMED_OUT (transient failure past the timeout)
    """

    PENDING = "pending"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    DROPPED_UNSUPPORTED = "dropped_unsupported"
    DROPPED_TIMED_OUT = "dropped_timed_out"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (OperationState.PENDING, OperationState.RETRYING)


class BatchGroup:
    """Completion counter shared by a batch of scheduled operations.

    Every operation scheduled with a batch enters it once and leaves it once,
    on whichever terminal path it takes (success, unsupported, timeout or
    failure), so wait() always returns within the global timeout.

    Fatal errors raised by member operations are collected and the first one
    is re-raised by wait() once the batch has drained.
    """

    def __init__(self):
        self._condition = threading.Condition()
        self._pending = 0
        self._errors: list[Exception] = []

    @property
    def pending(self) -> int:
        with self._condition:
            return self._pending

    @property
    def errors(self) -> list[Exception]:
        with self._condition:
            return list(self._errors)

    def enter(self) -> None:
        with self._condition:
            self._pending += 1

    def leave(self, error: Optional[Exception] = None) -> None:
        """Release one member; decrement and check happen under one lock.

        Raises:
            RuntimeError: If called more often than enter()
        """
        with self._condition:
            if self._pending == 0:
                raise RuntimeError("BatchGroup.leave() called more often than enter()")
            self._pending -= 1
            if error is not None:
                self._errors.append(error)
            if self._pending == 0:
                self._condition.notify_all()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every member has reached a terminal state.

        Args:
            timeout: Maximum seconds to wait (None waits for the batch to drain)

        Returns:
            True if the batch drained, False if the wait timed out

        Raises:
            Exception: The first fatal error recorded by a member operation
        """
        with self._condition:
            drained = self._condition.wait_for(lambda: self._pending == 0, timeout)
            errors = list(self._errors)

        if drained and errors:
            raise errors[0]
        return drained

    async def wait_async(self, timeout: Optional[float] = None) -> bool:
        """Asyncio variant of wait(); the blocking wait runs in a worker thread."""
        return await asyncio.to_thread(self.wait, timeout)


class ScheduledOperation:
    """Handle on one operation owned by the scheduler.

    Attributes:
        name: Operation name used in log messages
        timeout: Retry budget in seconds, measured from the first attempt
        state: Current OperationState
        attempts: Number of attempts made so far
        error: Exception that ended the operation (None on success)
    """

    def __init__(
        self,
        operation: Operation,
        timeout: float,
        on_complete: Optional[CompletionCallback] = None,
        batch: Optional[BatchGroup] = None,
        name: Optional[str] = None,
    ):
        self.operation = operation
        self.timeout = timeout
        self.on_complete = on_complete
        self.batch = batch
        self.name = name or getattr(operation, "__qualname__", repr(operation))
        self.state = OperationState.PENDING
        self.attempts = 0
        self.error: Optional[Exception] = None
        self.started_at: Optional[float] = None
        self.finished_at: Optional[float] = None
        # Event loop the operation was scheduled on
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._done = threading.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def elapsed(self) -> Optional[float]:
        """Seconds between the first attempt and the terminal state."""
        if self.started_at is None or self.finished_at is None:
            return None
        return self.finished_at - self.started_at

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the operation reaches a terminal state."""
        return self._done.wait(timeout)

    def _finish(self, state: OperationState, error: Optional[Exception], now: float) -> None:
        if self.state.is_terminal:
            raise RuntimeError(f"Operation {self.name} already finished as {self.state.value}")
        self.state = state
        self.error = error
        self.finished_at = now

    def __repr__(self) -> str:
        return f"ScheduledOperation({self.name}, {self.state.value}, attempts={self.attempts})"


class RetryScheduler:
    """Runs fallible operations on a dedicated background event loop.

    Each attempt calls the operation once:
    - returns normally: succeeded; on_complete fires exactly once
    - raises TransientFailureError: retried after the fixed backoff while
      the time since the first attempt is below the timeout, otherwise
      dropped quietly
    - raises UnsupportedAttributeError: dropped immediately
    - raises anything else: failed, logged, never retried

    The batch counter (if any) is released on every one of these paths.
    """

    def __init__(
        self,
        global_timeout: Optional[float] = None,
        backoff_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        name: str = "attribute-calls",
    ):
        """Initialize scheduler.

        Args:
            global_timeout: Default retry budget in seconds (default: configured global timeout)
            backoff_seconds: Delay between attempts (default: configured backoff)
            clock: Monotonic clock used to measure elapsed time
            name: Name of the background thread
        """
        if global_timeout is None or backoff_seconds is None:
            config = get_config()
            if global_timeout is None:
                global_timeout = config.global_timeout_seconds
            if backoff_seconds is None:
                backoff_seconds = config.retry_backoff_seconds

        self.global_timeout = global_timeout
        self.backoff_seconds = backoff_seconds
        self.name = name
        self._clock = clock
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._active: set[ScheduledOperation] = set()

    @property
    def is_running(self) -> bool:
        return self._loop is not None

    @property
    def active_count(self) -> int:
        """Number of operations that have not reached a terminal state."""
        with self._lock:
            return len(self._active)

    def start(self) -> None:
        """Start the background event loop (idempotent)."""
        with self._lock:
            self._start_unlocked()

    def _start_unlocked(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop

        loop = asyncio.new_event_loop()
        ready = threading.Event()

        def run() -> None:
            asyncio.set_event_loop(loop)
            ready.set()
            try:
                loop.run_forever()
            finally:
                pending = asyncio.all_tasks(loop)
                for task in pending:
                    task.cancel()
                if pending:
                    loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
                loop.close()

        thread = threading.Thread(target=run, name=self.name, daemon=True)
        thread.start()
        ready.wait()

        self._loop = loop
        self._thread = thread
        logger.debug(
            f"Started {self.name} scheduler "
            f"(timeout={self.global_timeout}s, backoff={self.backoff_seconds * 1000:.0f}ms)"
        )
        return loop

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the background loop.

        Operations still in flight are dropped as timed out so that no batch
        waiter is left hanging.
        """
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
            if loop is None:
                return
            loop.call_soon_threadsafe(self._shutdown, loop)

        if thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug(f"Stopped {self.name} scheduler")

    def __enter__(self) -> "RetryScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def schedule(
        self,
        operation: Operation,
        timeout: Optional[float] = None,
        on_complete: Optional[CompletionCallback] = None,
        batch: Optional[BatchGroup] = None,
        name: Optional[str] = None,
    ) -> ScheduledOperation:
        """Enqueue an operation and return immediately.

        Args:
            operation: Zero-argument callable (or coroutine function)
            timeout: Retry budget override in seconds (default: global timeout)
            on_complete: Called once on success, on the background thread
            batch: Batch counter entered now and left on any terminal path
            name: Name used in log messages

        Returns:
            ScheduledOperation handle

        Raises:
            MalformedRequestError: If operation is not callable or timeout is negative
        """
        if not callable(operation):
            raise MalformedRequestError(
                f"Scheduled operation must be callable, got {type(operation).__name__}"
            )
        if timeout is None:
            timeout = self.global_timeout
        if timeout < 0:
            raise MalformedRequestError(f"Timeout must be >= 0, got {timeout}")

        op = ScheduledOperation(operation, timeout, on_complete, batch, name)
        if batch is not None:
            batch.enter()

        with self._lock:
            loop = self._start_unlocked()
            op._loop = loop
            self._active.add(op)
            loop.call_soon_threadsafe(self._spawn, op)

        return op

    def run_batch(
        self,
        operations: Iterable[Operation],
        timeout: Optional[float] = None,
        wait_timeout: Optional[float] = None,
    ) -> bool:
        """Schedule operations as one batch and block until all are terminal.

        Returns:
            True if the batch drained within wait_timeout
        """
        batch = BatchGroup()
        for operation in operations:
            self.schedule(operation, timeout=timeout, batch=batch)
        return batch.wait(wait_timeout)

    def _spawn(self, op: ScheduledOperation) -> None:
        if op.state.is_terminal:
            return
        asyncio.get_running_loop().create_task(self._attempt(op))

    async def _attempt(self, op: ScheduledOperation) -> None:
        if op.state.is_terminal:
            return
        if op.started_at is None:
            op.started_at = self._clock()
        op.state = OperationState.PENDING
        op.attempts += 1

        try:
            result = op.operation()
            if inspect.isawaitable(result):
                await result
        except TransientFailureError as e:
            elapsed = self._clock() - op.started_at
            if elapsed < op.timeout:
                op.state = OperationState.RETRYING
                logger.debug(
                    f"{op.name}: transient failure on attempt {op.attempts} "
                    f"({elapsed:.3f}s elapsed), retrying in {self.backoff_seconds * 1000:.0f}ms"
                )
                asyncio.get_running_loop().call_later(self.backoff_seconds, self._spawn, op)
            else:
                logger.debug(
                    f"{op.name}: giving up after {op.attempts} attempts ({elapsed:.3f}s)"
                )
                self._complete(op, OperationState.DROPPED_TIMED_OUT, DeadlineExceededError(
                    f"{op.name} did not succeed within {op.timeout}s",
                    context={"attempts": op.attempts, "last_error": e.message},
                ))
        except UnsupportedAttributeError as e:
            logger.debug(f"{op.name}: unsupported, dropping ({e.message})")
            self._complete(op, OperationState.DROPPED_UNSUPPORTED, e)
        except Exception as e:
            logger.error(f"{op.name}: failed on attempt {op.attempts}: {e}", exc_info=True)
            self._complete(op, OperationState.FAILED, e)
        else:
            self._complete(op, OperationState.SUCCEEDED)

    def _complete(
        self,
        op: ScheduledOperation,
        state: OperationState,
        error: Optional[Exception] = None,
    ) -> None:
        # An operation abandoned on shutdown may still return from its last attempt
        if op.state.is_terminal:
            return
        op._finish(state, error, self._clock())
        with self._lock:
            self._active.discard(op)

        try:
            if state == OperationState.SUCCEEDED and op.on_complete is not None:
                try:
                    op.on_complete()
                except Exception as e:
                    logger.error(f"{op.name}: completion callback raised: {e}", exc_info=True)
        finally:
            if op.batch is not None:
                op.batch.leave(error if state == OperationState.FAILED else None)
            op._done.set()

    def _shutdown(self, loop: asyncio.AbstractEventLoop) -> None:
        with self._lock:
            remaining = [
                op for op in self._active
                if op._loop is loop and not op.state.is_terminal
            ]

        for op in remaining:
            self._complete(op, OperationState.DROPPED_TIMED_OUT, DeadlineExceededError(
                f"{op.name} abandoned: scheduler stopped",
                context={"attempts": op.attempts},
            ))
        if remaining:
            logger.debug(f"Dropped {len(remaining)} in-flight operation(s) on shutdown")

        loop.stop()


# Process-wide scheduler shared by every attribute source call
_default_scheduler: Optional[RetryScheduler] = None
_default_lock = threading.Lock()


def get_scheduler() -> RetryScheduler:
    """Get the shared scheduler, creating it with the configured global timeout."""
    global _default_scheduler
    with _default_lock:
        if _default_scheduler is None:
            _default_scheduler = RetryScheduler()
        return _default_scheduler


def schedule_retryable(
    operation: Operation,
    timeout: Optional[float] = None,
    on_complete: Optional[CompletionCallback] = None,
    batch: Optional[BatchGroup] = None,
) -> ScheduledOperation:
    """Schedule an operation on the shared scheduler.

    See RetryScheduler.schedule().
    """
    return get_scheduler().schedule(operation, timeout=timeout, on_complete=on_complete, batch=batch)
