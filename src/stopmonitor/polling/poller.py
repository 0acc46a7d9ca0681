"""
Periodic refresh of the stop records.

The Poller fetches immediately on `start()` and then at a fixed cadence of
fetch starts. Its own loop never overlaps fetches: when a fetch overruns the
interval the next one starts right after it. Out-of-band fetches issued by
`refresh_now()` may overlap with the loop, so every fetch carries:

- the token of the `start()` call that issued it, and
- a sequence number, increasing with every issued fetch.

A response (or failure) is delivered only if its token is still current and
its sequence number is the latest issued: the last issued request wins and
anything older is dropped. `stop()` invalidates the token synchronously, so
once it returns no callback runs again, even for a fetch already in flight.

Fetch failures are reported through `on_error` and never end the loop.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Set, Tuple

from ..models.events import StopEvent
from ..normalization import DEFAULT_UNKNOWN_REASON, normalize
from ..validation import ApplicationError, FetchError, handle_fetch_error

logger = logging.getLogger(__name__)

FetchCallable = Callable[[], Awaitable[Any]]
ResultCallback = Callable[[Tuple[StopEvent, ...]], None]
ErrorCallback = Callable[[FetchError], None]

DEFAULT_INTERVAL_SECONDS = 5.0


@dataclass(frozen=True)
class PollToken:
    """Identifies one `start()` of a Poller."""

    generation: int


@dataclass
class PollerStats:
    """Counters describing what the poller has done so far."""

    fetches_issued: int = 0
    results_delivered: int = 0
    errors_delivered: int = 0
    responses_discarded: int = 0


class Poller:
    """
    Drives the refresh cadence and guards against stale responses.

    Args:
        fetch: Coroutine function returning the decoded payload; it should
            raise FetchError subclasses for classified failures
        interval_seconds: Time between the starts of consecutive fetches
        unknown_reason: Label given to records without a reason
        name: Name used for the asyncio tasks and in log messages
    """

    def __init__(
        self,
        fetch: FetchCallable,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        unknown_reason: str = DEFAULT_UNKNOWN_REASON,
        name: str = "stop-poller",
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._fetch = fetch
        self.interval_seconds = interval_seconds
        self.unknown_reason = unknown_reason
        self.name = name
        self.stats = PollerStats()

        self._generations = itertools.count(1)
        self._token: Optional[PollToken] = None
        self._issued_seq = 0
        self._on_result: Optional[ResultCallback] = None
        self._on_error: Optional[ErrorCallback] = None
        self._loop_task: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._token is not None

    @property
    def token(self) -> Optional[PollToken]:
        return self._token

    def start(self, on_result: ResultCallback, on_error: ErrorCallback) -> PollToken:
        """
        Start polling: one fetch now, then one every `interval_seconds`.

        Must be called from within a running event loop.

        Returns:
            The token identifying this run

        Raises:
            RuntimeError: If the poller is already running or no loop is running
        """
        if self._token is not None:
            raise RuntimeError(f"{self.name} is already running")
        asyncio.get_running_loop()

        token = PollToken(next(self._generations))
        self._token = token
        self._on_result = on_result
        self._on_error = on_error
        self._loop_task = asyncio.create_task(self._run(token), name=f"{self.name}-{token.generation}")

        logger.info(f"{self.name} started (run {token.generation}, every {self.interval_seconds:g}s)")
        return token

    def stop(self) -> None:
        """
        Stop polling. No callback is invoked after this returns.

        In-flight fetches are cancelled; any that still complete are
        discarded because their token is no longer current.
        """
        if self._token is None:
            return
        generation = self._token.generation
        self._token = None
        self._on_result = None
        self._on_error = None

        if self._loop_task is not None:
            self._loop_task.cancel()
            self._loop_task = None
        for task in list(self._pending):
            task.cancel()

        logger.info(f"{self.name} stopped (run {generation})")

    async def aclose(self) -> None:
        """Stop polling and wait until the cancelled tasks have finished."""
        tasks = [t for t in [self._loop_task, *self._pending] if t is not None]
        self.stop()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def refresh_now(self) -> asyncio.Task:
        """
        Issue one fetch immediately, outside the regular cadence.

        The fetch supersedes any fetch already in flight. The cadence itself
        is not shifted.

        Returns:
            The task running the fetch; it resolves to True if the outcome
            was delivered

        Raises:
            RuntimeError: If the poller is not running
        """
        if self._token is None:
            raise RuntimeError(f"{self.name} is not running")
        task = asyncio.create_task(self._fetch_and_deliver(self._token), name=f"{self.name}-refresh")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _is_current(self, token: PollToken, seq: int) -> bool:
        return token is self._token and seq == self._issued_seq

    async def _run(self, token: PollToken) -> None:
        loop = asyncio.get_running_loop()
        next_start = loop.time()
        while token is self._token:
            await self._fetch_and_deliver(token)
            next_start += self.interval_seconds
            delay = next_start - loop.time()
            if delay < 0:
                logger.debug(f"{self.name}: fetch overran the interval by {-delay:.3f}s")
                next_start = loop.time()
                delay = 0
            await asyncio.sleep(delay)

    async def _fetch_and_deliver(self, token: PollToken) -> bool:
        self._issued_seq += 1
        seq = self._issued_seq
        self.stats.fetches_issued += 1

        payload: Any = None
        error: Optional[FetchError] = None
        try:
            payload = await self._fetch()
        except FetchError as e:
            error = e
        except Exception as e:
            logger.error(f"{self.name}: unexpected failure in fetch #{seq}: {e}", exc_info=True)
            error = ApplicationError(f"Unexpected error while fetching: {e}")

        if not self._is_current(token, seq):
            self.stats.responses_discarded += 1
            logger.debug(f"{self.name}: discarding stale response #{seq} (latest #{self._issued_seq})")
            return False

        if error is not None:
            handle_fetch_error(error, logger=logger)
            self.stats.errors_delivered += 1
            self._deliver(self._on_error, error)
        else:
            events = normalize(payload, self.unknown_reason)
            logger.debug(f"{self.name}: fetch #{seq} returned {len(events)} records")
            self.stats.results_delivered += 1
            self._deliver(self._on_result, events)
        return True

    def _deliver(self, callback: Optional[Callable[[Any], None]], value: Any) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            logger.error(f"{self.name}: consumer callback failed: {e}", exc_info=True)
