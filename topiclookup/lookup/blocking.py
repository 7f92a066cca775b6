"""
Blocking adapter over the asynchronous lookup core.

A blocking call submits the lookup to the transport's event loop and parks
the calling thread until one of three things happens: the lookup
completes, the deadline passes, or the caller's CancellationToken is
cancelled. In the last two cases the lookup is abandoned, not cancelled;
it keeps running on the loop and its result is dropped.
"""

import concurrent.futures
import threading
from typing import Any, Callable, Coroutine, List, Optional, TypeVar

from topiclookup.errors import InterruptedLookupError, LookupTimeoutError
from topiclookup.lookup.result import Result
from topiclookup.transport.loop import EventLoopThread
from topiclookup.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class CancellationToken:
    """
    Cooperative cancellation signal for blocking waits.

    One thread waits, any other thread may call cancel(). A token stays
    cancelled once cancelled.
    """

    def __init__(self):
        self._cancelled = threading.Event()
        self._callbacks: List[Callable[[], Any]] = []
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Cancel the token and wake every registered waiter."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], Any]) -> Callable[[], None]:
        """
        Register a callback run on cancellation.

        Runs immediately if the token is already cancelled.

        Args:
            callback: Zero-argument callable

        Returns:
            Function that unregisters the callback
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)

        callback()
        return lambda: None

    def _remove_callback(self, callback: Callable[[], Any]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)


class BlockingAdapter:
    """
    Runs Result-returning coroutines to completion with a bounded wait.

    Only the calling thread is suspended; the lookup itself runs on the
    event loop thread.
    """

    def __init__(self, io_thread: EventLoopThread, default_timeout_ms: int):
        """
        Initialize blocking adapter.

        Args:
            io_thread: Event loop thread the lookups run on
            default_timeout_ms: Deadline used when a call gives none
        """
        self._io = io_thread
        self.default_timeout_ms = default_timeout_ms

    def call(
        self,
        operation: Callable[[], Coroutine[Any, Any, Result[T]]],
        timeout_ms: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
        name: str = "lookup",
    ) -> T:
        """
        Run an asynchronous lookup and wait for it.

        Args:
            operation: Zero-argument callable returning the coroutine to run
            timeout_ms: Deadline in milliseconds (default: default_timeout_ms)
            cancel_token: Token that interrupts the wait when cancelled
            name: Operation name for logging

        Returns:
            The lookup's value

        Raises:
            TopicLookupError: The lookup's own failure
            LookupTimeoutError: If the deadline passed first
            InterruptedLookupError: If the token was cancelled first
            RuntimeError: If called from the event loop thread
        """
        if self._io.in_loop_thread():
            raise RuntimeError(
                f"Blocking {name} called from the lookup event loop thread"
            )

        if cancel_token is not None and cancel_token.cancelled:
            raise InterruptedLookupError(f"{name} interrupted before it started")

        timeout_ms = self.default_timeout_ms if timeout_ms is None else timeout_ms

        future = self._io.submit(operation())
        wakeup = threading.Event()
        future.add_done_callback(lambda _: wakeup.set())
        unregister = cancel_token.add_callback(wakeup.set) if cancel_token else None

        try:
            wakeup.wait(timeout_ms / 1000.0)
        finally:
            if unregister is not None:
                unregister()

        if future.done():
            try:
                result = future.result()
            except concurrent.futures.CancelledError as e:
                raise InterruptedLookupError(f"{name} was cancelled", cause=e) from e
            return result.unwrap()

        if cancel_token is not None and cancel_token.cancelled:
            logger.warning("Abandoning interrupted lookup", operation=name)
            raise InterruptedLookupError(f"{name} interrupted while waiting")

        logger.warning("Abandoning timed out lookup", operation=name, timeout_ms=timeout_ms)
        raise LookupTimeoutError(f"{name} timed out after {timeout_ms} ms")
