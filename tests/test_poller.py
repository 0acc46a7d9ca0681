"""
Tests for the Poller: cadence, error reporting, cancellation and the
last-issued-request-wins rule for overlapping fetches.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, Mock

from stopmonitor.polling import Poller, PollToken
from stopmonitor.validation import ApplicationError, NetworkError


class Recorder:
    """Collects poller callbacks and lets tests wait for them."""

    def __init__(self):
        self.results = []
        self.errors = []
        self.changed = asyncio.Event()

    def on_result(self, events):
        self.results.append(events)
        self.changed.set()

    def on_error(self, error):
        self.errors.append(error)
        self.changed.set()

    async def wait_for(self, predicate, timeout=2.0):
        async def _wait():
            while not predicate():
                self.changed.clear()
                await self.changed.wait()
        await asyncio.wait_for(_wait(), timeout)


class TestPollerLifecycle:

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            Poller(AsyncMock(), interval_seconds=0)

    def test_start_requires_running_loop(self):
        poller = Poller(AsyncMock(), interval_seconds=1)
        with pytest.raises(RuntimeError):
            poller.start(Mock(), Mock())
        assert not poller.is_running

    @pytest.mark.asyncio
    async def test_start_twice_raises(self):
        poller = Poller(AsyncMock(return_value=[]), interval_seconds=10)
        poller.start(Mock(), Mock())
        try:
            with pytest.raises(RuntimeError):
                poller.start(Mock(), Mock())
        finally:
            await poller.aclose()

    @pytest.mark.asyncio
    async def test_restart_issues_new_token(self):
        poller = Poller(AsyncMock(return_value=[]), interval_seconds=10)
        first = poller.start(Mock(), Mock())
        poller.stop()
        second = poller.start(Mock(), Mock())
        try:
            assert isinstance(second, PollToken)
            assert second != first
            assert poller.token is second
        finally:
            await poller.aclose()

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self):
        poller = Poller(AsyncMock(return_value=[]), interval_seconds=10)
        poller.start(Mock(), Mock())
        poller.stop()
        poller.stop()
        assert not poller.is_running
        await poller.aclose()

    def test_refresh_requires_running_poller(self):
        poller = Poller(AsyncMock(), interval_seconds=1)
        with pytest.raises(RuntimeError):
            poller.refresh_now()


class TestPollerDelivery:

    @pytest.mark.asyncio
    async def test_fetches_immediately_and_normalizes(self):
        fetch = AsyncMock(return_value={"stops": [{"machine": "M01"}]})
        recorder = Recorder()
        poller = Poller(fetch, interval_seconds=10, unknown_reason="Unknown")

        poller.start(recorder.on_result, recorder.on_error)
        await recorder.wait_for(lambda: recorder.results)
        await poller.aclose()

        assert fetch.await_count == 1
        assert recorder.results[0][0].reason == "Unknown"
        assert recorder.results[0][0].machine == "M01"
        assert recorder.errors == []

    @pytest.mark.asyncio
    async def test_error_then_recovery(self):
        fetch = AsyncMock(side_effect=[NetworkError("refused"), [{"reason": "Jam"}]])
        recorder = Recorder()
        poller = Poller(fetch, interval_seconds=0.01)

        poller.start(recorder.on_result, recorder.on_error)
        await recorder.wait_for(lambda: recorder.results)
        await poller.aclose()

        assert len(recorder.errors) == 1
        assert isinstance(recorder.errors[0], NetworkError)
        assert recorder.results[0][0].reason == "Jam"
        assert poller.stats.errors_delivered == 1
        assert poller.stats.results_delivered == 1

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_application_error(self):
        fetch = AsyncMock(side_effect=KeyError("boom"))
        recorder = Recorder()
        poller = Poller(fetch, interval_seconds=10)

        poller.start(recorder.on_result, recorder.on_error)
        await recorder.wait_for(lambda: recorder.errors)
        await poller.aclose()

        assert isinstance(recorder.errors[0], ApplicationError)
        assert poller.is_running is False

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_end_the_loop(self):
        fetch = AsyncMock(return_value=[])
        calls = []

        def on_result(events):
            calls.append(events)
            raise RuntimeError("consumer bug")

        poller = Poller(fetch, interval_seconds=0.01)
        poller.start(on_result, Mock())
        for _ in range(200):
            if len(calls) >= 3:
                break
            await asyncio.sleep(0.01)
        await poller.aclose()

        assert len(calls) >= 3


class TestPollerCancellation:

    @pytest.mark.asyncio
    async def test_no_callback_after_stop(self):
        gate = asyncio.Event()
        started = asyncio.Event()

        async def fetch():
            started.set()
            await gate.wait()
            return [{"reason": "late"}]

        recorder = Recorder()
        poller = Poller(fetch, interval_seconds=10)
        poller.start(recorder.on_result, recorder.on_error)
        await asyncio.wait_for(started.wait(), 2)

        poller.stop()
        gate.set()
        await asyncio.sleep(0.05)

        assert recorder.results == []
        assert recorder.errors == []

    @pytest.mark.asyncio
    async def test_refresh_supersedes_in_flight_fetch(self):
        gate = asyncio.Event()
        started = asyncio.Event()
        calls = 0

        async def fetch():
            nonlocal calls
            calls += 1
            if calls == 1:
                started.set()
                await gate.wait()
                return [{"reason": "old"}]
            return [{"reason": "new"}]

        recorder = Recorder()
        poller = Poller(fetch, interval_seconds=10)
        poller.start(recorder.on_result, recorder.on_error)
        await asyncio.wait_for(started.wait(), 2)

        delivered = await poller.refresh_now()
        assert delivered is True

        gate.set()
        await asyncio.sleep(0.05)
        await poller.aclose()

        assert [events[0].reason for events in recorder.results] == ["new"]
        assert poller.stats.responses_discarded == 1

    @pytest.mark.asyncio
    async def test_stale_refresh_is_discarded(self):
        gate = asyncio.Event()
        calls = 0

        async def fetch():
            nonlocal calls
            calls += 1
            if calls == 2:
                await gate.wait()
                return [{"reason": "stale"}]
            return [{"reason": f"fresh-{calls}"}]

        recorder = Recorder()
        poller = Poller(fetch, interval_seconds=10)
        poller.start(recorder.on_result, recorder.on_error)
        await recorder.wait_for(lambda: recorder.results)

        slow = poller.refresh_now()
        await asyncio.sleep(0)
        fast = await poller.refresh_now()
        gate.set()
        assert await slow is False
        assert fast is True
        await poller.aclose()

        assert [events[0].reason for events in recorder.results] == ["fresh-1", "fresh-3"]


class TestPollerCadence:

    @pytest.mark.asyncio
    @pytest.mark.slow
    async def test_repeats_at_interval(self):
        fetch = AsyncMock(return_value=[])
        poller = Poller(fetch, interval_seconds=0.05)
        poller.start(Mock(), Mock())
        await asyncio.sleep(0.32)
        await poller.aclose()

        assert 3 <= fetch.await_count <= 9

    @pytest.mark.asyncio
    @pytest.mark.slow
    async def test_loop_never_overlaps_its_own_fetches(self):
        active = 0
        peak = 0

        async def fetch():
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.03)
            active -= 1
            return []

        poller = Poller(fetch, interval_seconds=0.01)
        poller.start(Mock(), Mock())
        await asyncio.sleep(0.2)
        await poller.aclose()

        assert peak == 1
        assert poller.stats.fetches_issued >= 3
