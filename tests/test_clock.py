"""Tests for the clock service display loop and background synchronizer."""
from __future__ import annotations

import asyncio
import threading
import time

import pytest

from avtime.clock import Service, build_frame
from avtime.ntp import ProtocolError, ResolutionError
from avtime.sync import Manager
from conftest import T, FakeSynchronizer, FakeTerminal


def _service(synchronizer, clock, terminal, interval=60.0):
    return Service(
        server=synchronizer.server,
        interval=interval,
        manager=Manager(synchronizer, clock=clock),
        terminal=terminal
    )


def test_frame_right_after_a_synchronization(clock):
    manager = Manager(FakeSynchronizer("pool.ntp.org", [0.037]), clock=clock)
    asyncio.run(manager.refresh())

    frame = build_frame(manager.snapshot(), interval=10)

    assert not frame.synchronizing
    assert frame.server == "pool.ntp.org"
    assert frame.offset == "+37 ms"
    assert frame.offset_severity == "caution"
    assert frame.sync == "0s ago (next in 10s)"
    assert frame.freshness == "fresh"
    assert frame.freshness_severity == "nominal"
    assert frame.gauge == pytest.approx(1.0)
    assert frame.utc == "2023-11-14 22:13:20.037"


def test_frame_after_forty_seconds_without_synchronization(clock):
    manager = Manager(FakeSynchronizer("pool.ntp.org", [0.037]), clock=clock)
    asyncio.run(manager.refresh())
    clock.advance(40)

    frame = build_frame(manager.snapshot(), interval=10)

    assert frame.sync == "40s ago (next in 10s)"
    assert frame.freshness == "stale"
    assert frame.freshness_severity == "critical"
    assert frame.gauge == pytest.approx(0.0)
    assert frame.offset == "+37 ms"
    assert frame.utc == "2023-11-14 22:14:00.037"


def test_frame_of_a_manager_that_never_synchronized(clock):
    manager = Manager(FakeSynchronizer("pool.ntp.org", [0.0]), clock=clock)
    frame = build_frame(manager.snapshot())
    assert frame.sync == "never"
    assert frame.freshness == "stale"


def test_display_synchronizes_before_the_first_frame(clock):
    terminal = FakeTerminal(quit_after=4)
    service = _service(FakeSynchronizer("pool.ntp.org", [0.037]), clock, terminal)

    asyncio.run(service.display())

    assert terminal.entered and terminal.exited
    assert terminal.frames[0].synchronizing
    assert terminal.frames[0].server == "pool.ntp.org"
    assert len(terminal.frames) == 4
    assert all(not frame.synchronizing for frame in terminal.frames[1:])
    assert all(frame.offset == "+37 ms" for frame in terminal.frames[1:])
    assert service.ntp_synchronizer_task is not None


def test_failed_initial_synchronization_terminates_the_display(clock):
    terminal = FakeTerminal()
    error = ResolutionError("nowhere.invalid", "Unable to resolve the ntp server {nowhere.invalid}.")
    service = _service(FakeSynchronizer("nowhere.invalid", [error]), clock, terminal)

    with pytest.raises(ResolutionError):
        asyncio.run(service.display())

    assert terminal.exited
    assert len(terminal.frames) == 1
    assert terminal.frames[0].synchronizing
    assert service.ntp_synchronizer_task is None


def test_ntp_synchronizer_swallows_failures_and_keeps_refreshing(clock):
    synchronizer = FakeSynchronizer(
        "pool.ntp.org",
        [ProtocolError("pool.ntp.org", "Invalid NTP packet."), 0.012]
    )
    service = _service(synchronizer, clock, FakeTerminal(), interval=0.001)

    async def scenario():
        task = service.start_ntp_synchronizer()
        for _ in range(5000):
            if service.manager.offset == 12:
                break
            await asyncio.sleep(0.001)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        return task

    task = asyncio.run(asyncio.wait_for(scenario(), timeout=10))

    assert synchronizer.calls >= 2
    assert service.manager.offset == 12
    assert task.done()


def test_display_keeps_rendering_while_a_synchronization_hangs(clock):
    release = threading.Event()

    def hang():
        release.wait(timeout=10)
        return 0.5

    synchronizer = FakeSynchronizer("pool.ntp.org", [0.037, hang])
    terminal = FakeTerminal(quit_after=30, on_exit=release.set)
    service = _service(synchronizer, clock, terminal, interval=0.001)

    asyncio.run(service.display())

    assert len(terminal.frames) == 30
    assert all(frame.offset == "+37 ms" for frame in terminal.frames[1:])


def test_frame_of_a_long_lost_synchronization_is_not_never(clock):
    manager = Manager(FakeSynchronizer("pool.ntp.org", [0.037]), clock=clock)
    asyncio.run(manager.refresh())
    clock.advance(20_000)

    frame = build_frame(manager.snapshot(), interval=10)

    assert frame.sync.startswith("9999s ago")
    assert frame.freshness == "stale"


def test_quit_returns_promptly_while_a_synchronization_hangs(clock):
    release = threading.Event()

    def hang():
        release.wait(timeout=3)
        return 0.5

    synchronizer = FakeSynchronizer("pool.ntp.org", [0.037, hang])
    terminal = FakeTerminal(quit_after=50)
    service = _service(synchronizer, clock, terminal, interval=0.001)

    start = time.monotonic()
    try:
        asyncio.run(service.run())
        elapsed = time.monotonic() - start
    finally:
        release.set()

    assert synchronizer.calls == 2
    assert elapsed < 1.5
