"""
Event loop thread owned by the transport layer.

All lookup I/O for a LookupClient runs on one asyncio loop living in a
dedicated daemon thread. Async callers on other loops and blocking callers
on plain threads both submit coroutines here and wait on the returned
concurrent future.
"""

import asyncio
import concurrent.futures
import threading
from typing import Any, Coroutine, Optional

from topiclookup.utils.logging import get_logger

logger = get_logger(__name__)


class EventLoopThread:
    """
    Runs an asyncio event loop in a background thread.

    The loop is started lazily on first submit. Work that is still pending
    when the thread is stopped (for example lookups abandoned by a timed
    out blocking call) is cancelled before the loop closes.
    """

    def __init__(self, name: str = "topiclookup-io"):
        """
        Initialize event loop thread.

        Args:
            name: Thread name
        """
        self.name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()
        self._lock = threading.Lock()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        self.start()
        assert self._loop is not None
        return self._loop

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the loop thread if it is not running yet."""
        with self._lock:
            if self._thread is not None:
                return

            self._loop = asyncio.new_event_loop()
            self._thread = threading.Thread(
                target=self._run,
                name=self.name,
                daemon=True,
            )
            self._thread.start()

        self._started.wait()
        logger.debug("Event loop thread started", thread=self.name)

    def _run(self) -> None:
        assert self._loop is not None
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(self._started.set)
        self._loop.run_forever()

    def in_loop_thread(self) -> bool:
        """True when called from the loop thread itself."""
        return self._thread is not None and threading.current_thread() is self._thread

    def submit(self, coro: Coroutine[Any, Any, Any]) -> concurrent.futures.Future:
        """
        Schedule a coroutine on the loop.

        Args:
            coro: Coroutine to run

        Returns:
            Future completed on the loop thread
        """
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    async def _cancel_pending(self) -> None:
        tasks = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
        for task in tasks:
            task.cancel()

        await asyncio.gather(*tasks, return_exceptions=True)

        if tasks:
            logger.info("Cancelled pending lookups", count=len(tasks))

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop the loop and join the thread.

        Args:
            timeout: Seconds to wait for pending work to unwind
        """
        if self.in_loop_thread():
            raise RuntimeError("EventLoopThread.stop() called from its own loop thread")

        with self._lock:
            thread, loop = self._thread, self._loop
            if thread is None or loop is None:
                return

            self._thread = None
            self._loop = None
            self._started.clear()

        try:
            asyncio.run_coroutine_threadsafe(self._cancel_pending(), loop).result(timeout)
        except concurrent.futures.TimeoutError:
            logger.warning("Timed out cancelling pending lookups", thread=self.name)

        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout)

        if thread.is_alive():
            logger.warning("Event loop thread did not stop in time", thread=self.name)
            return

        loop.close()
        logger.debug("Event loop thread stopped", thread=self.name)
