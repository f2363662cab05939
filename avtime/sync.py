""" Shared synchronization state """

from __future__ import annotations
from typing import Callable, Optional, Tuple
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import asyncio
import functools
import threading
import time

import avtime

# The last synchronization timestamp of a manager that has never synchronized
EPOCH: float = 0.0


def seconds_between(now: float, last_sync_at: float) -> int:
    """ Returns the whole seconds elapsed from `last_sync_at` to `now`, saturated at
    `avtime.NEVER_SYNCED`.

    Parameters
    ----------
    now: `float`
        The current time in seconds since the epoch.
    last_sync_at: `float`
        The time of the last synchronization in seconds since the epoch.
    """
    if last_sync_at == EPOCH:
        return avtime.NEVER_SYNCED

    # A local clock that moved backwards cannot tell the age of the offset
    elapsed = now - last_sync_at
    if elapsed < 0:
        return avtime.NEVER_SYNCED

    return min(int(elapsed), avtime.NEVER_SYNCED)


def _settle(
    future: asyncio.Future,
    result: Optional[Tuple[int, float]] = None,
    exception: Optional[BaseException] = None
):
    # The awaiting task may have been cancelled during the measurement
    if future.done():
        return

    if exception is not None:
        future.set_exception(exception)
    else:
        future.set_result(result)


@dataclass(frozen=True)
class Snapshot():
    """ A `class` that represents a consistent read of the synchronization state.

    Attributes
    ----------
    server: `str`
        The network time protocol server.
    offset: `int`
        The last measured offset in milliseconds.
    last_sync_at: `float`
        The time of the last successful synchronization in seconds since the epoch.
    now: `float`
        The local time in seconds since the epoch, sampled with the offset.
    """
    server: str
    offset: int
    last_sync_at: float
    now: float

    @property
    def adjusted_time(self) -> datetime:
        """ The local time corrected by the offset. """
        return datetime.fromtimestamp(self.now, tz=timezone.utc) + timedelta(milliseconds=self.offset)

    @property
    def seconds_since_sync(self) -> int:
        """ The whole seconds elapsed since the last successful synchronization. """
        return seconds_between(self.now, self.last_sync_at)


class Manager():
    """ A `class` that represents the synchronization state shared between the background
    synchronizer and the display.

    The offset and the time of the last successful synchronization are only ever replaced
    together, under a lock that is held for the in-memory swap or copy and never for the
    network round-trip.
    """

    def __init__(
        self,
        synchronizer: avtime.ntp.Synchronizer,
        clock: Callable[[], float] = time.time
    ):
        """ Initializes an instance of the synchronization manager.

        Parameters
        ----------
        synchronizer: `avtime.ntp.Synchronizer`
            The network time protocol client that measures the offset.
        clock: `Callable[[], float]`
            The local wall-clock in seconds since the epoch.
        """
        self.synchronizer = synchronizer
        self.clock = clock

        self._server: str = synchronizer.server
        self._lock = threading.Lock()
        self._offset: int = 0
        self._last_sync_at: float = EPOCH

    @property
    def server(self) -> str:
        return self._server

    @property
    def offset(self) -> int:
        with self._lock:
            return self._offset

    @property
    def last_sync_at(self) -> float:
        with self._lock:
            return self._last_sync_at

    def measure(self) -> Tuple[int, float]:
        """ Returns the offset in milliseconds measured against the network time protocol server
        and the local time at which the measurement completed. Blocks for the network round-trip.
        """
        offset = self.synchronizer.offset()
        return round(offset * 1000), self.clock()

    async def refresh(self):
        """ Measures the offset against the network time protocol server and replaces the
        synchronization state. The measurement runs in a daemon thread, so the event loop keeps
        running for the round-trip and never waits for an unfinished measurement when it shuts down.

        Raises `avtime.ntp.SyncError` and leaves the state unchanged when the measurement fails.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        threading.Thread(
            target=self._measure_in_thread,
            args=(loop, future),
            name='avtime-ntp-measurement',
            daemon=True
        ).start()

        offset, synced_at = await future
        self._store(offset, synced_at)

    def _measure_in_thread(self, loop: asyncio.AbstractEventLoop, future: asyncio.Future):
        try:
            callback = functools.partial(_settle, future, result=self.measure())
        except Exception as e:
            callback = functools.partial(_settle, future, exception=e)

        try:
            loop.call_soon_threadsafe(callback)
        except RuntimeError:

            # The event loop closed during the measurement, nothing awaits the result
            return

    def _store(self, offset: int, synced_at: float):
        with self._lock:
            self._offset = offset
            self._last_sync_at = synced_at

    def snapshot(self) -> Snapshot:
        """ Returns a consistent read of the synchronization state. """
        with self._lock:
            return Snapshot(
                server=self._server,
                offset=self._offset,
                last_sync_at=self._last_sync_at,
                now=self.clock()
            )

    def adjusted_time(self) -> datetime:
        """ Returns the local time corrected by the last measured offset. """
        return self.snapshot().adjusted_time

    def seconds_since_sync(self) -> int:
        """ Returns the whole seconds elapsed since the last successful synchronization,
        or `avtime.NEVER_SYNCED` when the manager has never synchronized.
        """
        return self.snapshot().seconds_since_sync
