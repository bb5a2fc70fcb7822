from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from talentscout.logging_utils import structured_log
from talentscout.services.enrichment.errors import (
    EnrichmentQueueClosedError,
    GenerationConfigError,
    GenerationError,
)
from talentscout.settings import settings

logger = logging.getLogger(__name__)

RequestFn = Callable[[str], Awaitable[str]]
SleepFn = Callable[[float], Awaitable[None]]
ClockFn = Callable[[], float]


@dataclass
class _QueueItem:
    prompt: str
    future: asyncio.Future[str]


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, GenerationError) and not isinstance(exc, GenerationConfigError)


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome is not None else None
    structured_log(
        logger,
        "warning",
        "enrichment_queue.retry_scheduled",
        attempt=state.attempt_number,
        delay_seconds=state.next_action.sleep if state.next_action is not None else None,
        error=str(exc) if exc is not None else None,
    )


class EnrichmentQueue:
    """FIFO of prompts drained by one worker task.

    At most one ``request_fn`` call is outstanding at any time. Each call is
    retried with a linearly growing delay, and consecutive dispatches are
    spaced by at least ``min_dispatch_interval_seconds`` measured from the
    end of the previous dispatch.
    """

    def __init__(
        self,
        *,
        request_fn: RequestFn,
        max_attempts: int | None = None,
        retry_base_delay_seconds: float | None = None,
        min_dispatch_interval_seconds: float | None = None,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ) -> None:
        self._request_fn = request_fn
        configured_attempts = settings.enrichment_max_attempts if max_attempts is None else max_attempts
        self._max_attempts = max(int(configured_attempts), 1)
        configured_base = (
            settings.enrichment_retry_base_delay_seconds
            if retry_base_delay_seconds is None
            else retry_base_delay_seconds
        )
        self._retry_base_delay_seconds = max(float(configured_base), 0.0)
        configured_interval = (
            settings.enrichment_min_dispatch_interval_seconds
            if min_dispatch_interval_seconds is None
            else min_dispatch_interval_seconds
        )
        self._min_dispatch_interval_seconds = max(float(configured_interval), 0.0)
        self._sleep = sleep
        self._clock = clock
        self._loop: asyncio.AbstractEventLoop | None = None
        self._items: asyncio.Queue[_QueueItem] | None = None
        self._task: asyncio.Task[None] | None = None
        self._in_flight = False
        self._last_dispatch_ended_at: float | None = None
        self._closed = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def pending_count(self) -> int:
        return 0 if self._items is None else self._items.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, prompt: str) -> asyncio.Future[str]:
        """Enqueue ``prompt`` and return a future resolved with the generated text.

        Never blocks and never raises for delivery failures; those are set on
        the returned future once retries are exhausted.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()
        if self._closed:
            future.set_exception(EnrichmentQueueClosedError("enrichment queue is closed"))
            return future
        if self._loop is not loop:
            # asyncio.Queue binds to the loop it is first used on.
            self._loop = loop
            self._items = asyncio.Queue()
            self._task = None
        assert self._items is not None
        self._items.put_nowait(_QueueItem(prompt=prompt, future=future))
        self._ensure_worker()
        return future

    async def generate(self, prompt: str) -> str:
        return await self.submit(prompt)

    async def close(self) -> None:
        self._closed = True
        if self._task is not None and self._task.get_loop() is asyncio.get_running_loop():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            finally:
                self._task = None
        dropped = 0
        if self._items is not None:
            while not self._items.empty():
                item = self._items.get_nowait()
                if not item.future.done():
                    item.future.set_exception(EnrichmentQueueClosedError("enrichment queue is closed"))
                    dropped += 1
        structured_log(logger, "info", "enrichment_queue.closed", dropped_count=dropped)

    def _ensure_worker(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.create_task(self._run_loop(), name="talentscout-enrichment-queue")

    async def _run_loop(self) -> None:
        assert self._items is not None
        while True:
            item = await self._items.get()
            try:
                if item.future.cancelled():
                    continue
                try:
                    await self._wait_for_dispatch_slot()
                    self._in_flight = True
                    text = await self._dispatch(item.prompt)
                except asyncio.CancelledError:
                    if not item.future.done():
                        item.future.set_exception(
                            EnrichmentQueueClosedError("enrichment queue is closed")
                        )
                    raise
                except Exception as exc:
                    structured_log(
                        logger,
                        "warning",
                        "enrichment_queue.dispatch_failed",
                        attempts=self._max_attempts,
                        error=str(exc),
                    )
                    if not item.future.done():
                        item.future.set_exception(exc)
                else:
                    if not item.future.done():
                        item.future.set_result(text)
                finally:
                    self._in_flight = False
                    self._last_dispatch_ended_at = self._clock()
            finally:
                self._items.task_done()

    async def _wait_for_dispatch_slot(self) -> None:
        if self._last_dispatch_ended_at is None or self._min_dispatch_interval_seconds <= 0:
            return
        elapsed = self._clock() - self._last_dispatch_ended_at
        remaining = self._min_dispatch_interval_seconds - elapsed
        if remaining > 0:
            await self._sleep(remaining)

    async def _dispatch(self, prompt: str) -> str:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_incrementing(
                start=self._retry_base_delay_seconds,
                increment=self._retry_base_delay_seconds,
            ),
            retry=retry_if_exception(_is_retryable),
            sleep=self._sleep,
            before_sleep=_log_retry,
            reraise=True,
        )
        text = ""
        async for attempt in retrying:
            with attempt:
                text = await self._request_fn(prompt)
        return text
