"""
Tests for the blocking adapter and cancellation tokens.
"""

import asyncio
import threading
import time

import pytest

from topiclookup.errors import (
    InterruptedLookupError,
    LookupTimeoutError,
    NotPartitionedError,
    TransportError,
)
from topiclookup.lookup.blocking import BlockingAdapter, CancellationToken
from topiclookup.lookup.result import Result
from topiclookup.transport.loop import EventLoopThread


@pytest.fixture
def io_thread():
    """Event loop thread for the adapter."""
    thread = EventLoopThread(name="test-io")
    yield thread
    thread.stop()


@pytest.fixture
def adapter(io_thread):
    """Blocking adapter with a one second default deadline."""
    return BlockingAdapter(io_thread, default_timeout_ms=1000)


async def succeed(value):
    await asyncio.sleep(0)
    return Result.ok(value)


async def fail(error):
    await asyncio.sleep(0)
    return Result.failure(error)


async def never_complete():
    await asyncio.Event().wait()
    return Result.ok("unreachable")


class TestBlockingAdapter:
    """Test BlockingAdapter.call."""

    def test_success(self, adapter):
        """Test the value of a successful lookup is returned."""
        assert adapter.call(lambda: succeed("pulsar://b1:6650")) == "pulsar://b1:6650"

    def test_failure_raises_original_error(self, adapter):
        """Test failures raise the stored error itself."""
        error = NotPartitionedError("Topic t is not a partitioned topic")

        with pytest.raises(NotPartitionedError) as exc_info:
            adapter.call(lambda: fail(error))

        assert exc_info.value is error

    def test_timeout(self, adapter):
        """Test a lookup that never completes times out."""
        start = time.monotonic()

        with pytest.raises(LookupTimeoutError) as exc_info:
            adapter.call(never_complete, timeout_ms=100)

        elapsed = time.monotonic() - start
        assert 0.09 <= elapsed < 1.0
        assert isinstance(exc_info.value, TimeoutError)
        assert not isinstance(exc_info.value, TransportError)

    def test_timeout_differs_from_transport_failure(self, adapter):
        """Test timeouts and transport failures are distinct kinds."""
        with pytest.raises(TransportError) as transport_failure:
            adapter.call(lambda: fail(TransportError("connection refused")), timeout_ms=100)

        with pytest.raises(LookupTimeoutError) as timeout_failure:
            adapter.call(never_complete, timeout_ms=100)

        assert not isinstance(transport_failure.value, LookupTimeoutError)
        assert not isinstance(timeout_failure.value, TransportError)

    def test_default_timeout(self, io_thread):
        """Test the default deadline applies when none is given."""
        adapter = BlockingAdapter(io_thread, default_timeout_ms=50)

        with pytest.raises(LookupTimeoutError, match="50 ms"):
            adapter.call(never_complete)

    def test_timed_out_work_is_abandoned_not_cancelled(self, adapter):
        """Test the lookup keeps running after the caller gives up."""
        finished = threading.Event()

        async def slow():
            await asyncio.sleep(0.2)
            finished.set()
            return Result.ok("late")

        with pytest.raises(LookupTimeoutError):
            adapter.call(slow, timeout_ms=20)

        assert finished.wait(2)

    def test_cancel_token_interrupts_wait(self, adapter):
        """Test cancelling the token from another thread ends the wait."""
        token = CancellationToken()
        timer = threading.Timer(0.05, token.cancel)
        timer.start()

        start = time.monotonic()
        try:
            with pytest.raises(InterruptedLookupError):
                adapter.call(never_complete, timeout_ms=5000, cancel_token=token)
        finally:
            timer.cancel()

        assert time.monotonic() - start < 2

    def test_pre_cancelled_token(self, adapter):
        """Test a cancelled token fails before the lookup starts."""
        token = CancellationToken()
        token.cancel()
        started = []

        def operation():
            started.append(True)
            return succeed("value")

        with pytest.raises(InterruptedLookupError):
            adapter.call(operation, cancel_token=token)

        assert started == []

    def test_completed_result_wins_over_later_cancel(self, adapter):
        """Test a token cancelled after completion does not matter."""
        token = CancellationToken()

        assert adapter.call(lambda: succeed(1), cancel_token=token) == 1

        token.cancel()
        assert token.cancelled

    def test_call_from_loop_thread_rejected(self, adapter, io_thread):
        """Test blocking on the loop thread itself is refused."""
        async def block_inside_loop():
            return adapter.call(lambda: succeed("value"))

        with pytest.raises(RuntimeError, match="event loop thread"):
            io_thread.submit(block_inside_loop()).result(2)


class TestCancellationToken:
    """Test CancellationToken."""

    def test_initial_state(self):
        """Test new tokens are not cancelled."""
        assert not CancellationToken().cancelled

    def test_callbacks_run_once(self):
        """Test callbacks run on the first cancel only."""
        token = CancellationToken()
        calls = []
        token.add_callback(lambda: calls.append(1))

        token.cancel()
        token.cancel()

        assert calls == [1]

    def test_callback_after_cancel_runs_immediately(self):
        """Test late registrations run straight away."""
        token = CancellationToken()
        token.cancel()
        calls = []

        token.add_callback(lambda: calls.append(1))

        assert calls == [1]

    def test_unregister(self):
        """Test unregistered callbacks do not run."""
        token = CancellationToken()
        calls = []
        unregister = token.add_callback(lambda: calls.append(1))

        unregister()
        token.cancel()

        assert calls == []
