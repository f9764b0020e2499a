"""Polling watcher that turns directory snapshots into change events."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from ..domain.enums import WatcherState
from ..domain.events import InstanceCreated, InstanceRemoved, InstanceUpdated, WatchEvent
from ..domain.exceptions import WatcherStoppedError
from ..domain.models import Service
from ..domain.services import iter_changes, to_snapshot
from ..infrastructure.config import DEFAULT_POLL_INTERVAL, DEFAULT_QUEUE_SIZE
from ..infrastructure.simple_logger import SimpleLogger
from ..infrastructure.snapshot_store import SnapshotStore
from ..ports.logger import LoggerPort
from ..ports.registry import WatcherPort

FetchServices = Callable[[str], Awaitable[list[Service]]]


def describe(event: WatchEvent) -> str:
    """Short label for an event, used in logs."""
    match event:
        case InstanceCreated():
            return "created"
        case InstanceUpdated():
            return "updated"
        case InstanceRemoved():
            return "removed"


class ServiceWatcher(WatcherPort):
    """Polls one service and reports instance changes.

    The directory offers no push notifications, so the watcher fetches the
    full instance list every ``poll_interval`` seconds, compares it with the
    snapshot from the previous successful poll and queues one event per
    changed instance.

    The event queue is bounded. When it is full the poll loop waits for the
    consumer, so a slow consumer slows polling down instead of losing events.
    A failed fetch is logged and the tick skipped; the watcher only ends when
    ``stop()`` is called.
    """

    def __init__(
        self,
        service_name: str | None,
        fetch: FetchServices,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        snapshots: SnapshotStore | None = None,
        logger: LoggerPort | None = None,
    ):
        """Initialize the watcher.

        Args:
            service_name: Sanitized name of the service to poll; None watches
                nothing
            fetch: Coroutine returning the current single-node services for a
                sanitized name
            poll_interval: Seconds between polls
            queue_size: Capacity of the event queue
            snapshots: Store for the last observed snapshot
            logger: Optional logger
        """
        self._service_name = service_name
        self._fetch = fetch
        self._poll_interval = poll_interval
        self._queue: asyncio.Queue[WatchEvent] = asyncio.Queue(maxsize=queue_size)
        self._snapshots = snapshots or SnapshotStore()
        self._logger = logger or SimpleLogger()

        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._state = WatcherState.CREATED

    @property
    def service_name(self) -> str | None:
        return self._service_name

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def state(self) -> WatcherState:
        return self._state

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin polling if a service name was given.

        Without a service name the watcher stays idle: watching every service
        at once is not supported.
        """
        if self._state is not WatcherState.CREATED:
            return

        if not self._service_name:
            self._logger.warning("cloudmap-watcher: watching all services is not supported")
            return

        self._state = WatcherState.POLLING
        self._task = asyncio.create_task(
            self._watch_loop(), name=f"cloudmap-watcher-{self._service_name}"
        )
        self._logger.info(
            "cloudmap-watcher: started",
            service=self._service_name,
            poll_interval=self._poll_interval,
        )

    def stop(self) -> None:
        """Signal the watcher to stop. Safe to call any number of times.

        The loop notices the signal while it waits for the next tick or for
        room in the queue; a fetch that is already running is not
        interrupted, but nothing it finds is queued.
        """
        if self._stop_event.is_set():
            return

        self._stop_event.set()
        self._state = WatcherState.STOPPED
        self._logger.info("cloudmap-watcher: stopped", service=self._service_name)

    async def close(self, timeout: float = 5.0) -> None:
        """Stop the watcher and wait for its loop to finish."""
        self.stop()

        if self._task and not self._task.done():
            try:
                await asyncio.wait_for(self._task, timeout=timeout)
            except TimeoutError:
                self._logger.warning(
                    "cloudmap-watcher: loop did not exit in time, cancelled",
                    service=self._service_name,
                )
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def next(self) -> WatchEvent:
        """Wait for the next change event.

        Raises:
            WatcherStoppedError: If the watcher is, or becomes, stopped
        """
        if self._stop_event.is_set():
            raise WatcherStoppedError(self._service_name)

        get = asyncio.ensure_future(self._queue.get())
        stopped = asyncio.ensure_future(self._stop_event.wait())
        try:
            await asyncio.wait({get, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (get, stopped):
                if not task.done():
                    task.cancel()

        if self._stop_event.is_set():
            raise WatcherStoppedError(self._service_name)
        return get.result()

    def __aiter__(self) -> ServiceWatcher:
        return self

    async def __anext__(self) -> WatchEvent:
        try:
            return await self.next()
        except WatcherStoppedError:
            raise StopAsyncIteration from None

    async def __aenter__(self) -> ServiceWatcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _wait_for_stop(self, timeout: float) -> bool:
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True

    async def _watch_loop(self) -> None:
        while not self._stop_event.is_set():
            if await self._wait_for_stop(self._poll_interval):
                break

            self._logger.debug("cloudmap-watcher: tick", service=self._service_name)
            try:
                await self.poll()
            except Exception as e:
                self._logger.exception(
                    "cloudmap-watcher: poll cycle failed",
                    exc_info=e,
                    service=self._service_name,
                )

    async def poll(self) -> int:
        """Run one poll cycle.

        The cached snapshot is replaced only after every event of the cycle
        has been queued; a failed fetch or a stop during the cycle leaves it
        as it was.

        Returns:
            Number of events queued
        """
        service_name = self._service_name
        if not service_name or self._stop_event.is_set():
            return 0

        try:
            services = await self._fetch(service_name)
        except Exception as e:
            self._logger.error(
                "cloudmap-watcher: failed getting service",
                service=service_name,
                error=str(e),
            )
            return 0

        current = to_snapshot(services)
        previous = await self._snapshots.get(service_name)

        published = 0
        for event in iter_changes(previous, current):
            if not await self._publish(event):
                return published
            published += 1
            self._logger.debug(
                "cloudmap-watcher: instance change",
                service=service_name,
                instance=event.instance_id,
                change=describe(event),
            )

        await self._snapshots.replace(service_name, current)
        return published

    async def _publish(self, event: WatchEvent) -> bool:
        """Queue an event, waiting for room. False if stopped first."""
        if self._stop_event.is_set():
            return False

        if not self._queue.full():
            self._queue.put_nowait(event)
            return True

        self._logger.debug("cloudmap-watcher: queue full, waiting", service=self._service_name)
        put = asyncio.ensure_future(self._queue.put(event))
        stopped = asyncio.ensure_future(self._stop_event.wait())
        try:
            await asyncio.wait({put, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (put, stopped):
                if not task.done():
                    task.cancel()

        return put.done() and not put.cancelled() and not self._stop_event.is_set()
