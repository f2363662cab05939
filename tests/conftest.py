"""Shared fakes for the clock tests."""
from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from avtime.terminal import Frame

# A wall-clock time well after the epoch, 2023-11-14 22:13:20 UTC
T = 1_700_000_000.0


class FakeClock:
    """A wall-clock that only moves when told to."""

    def __init__(self, now: float = T) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSynchronizer:
    """Replays offsets in seconds, exceptions or callables; the last result repeats."""

    def __init__(self, server: str, results: List, on_measure: Optional[Callable[[], None]] = None) -> None:
        self.server = server
        self.results = results
        self.on_measure = on_measure
        self.calls = 0

    def offset(self) -> float:
        self.calls += 1
        if self.on_measure is not None:
            self.on_measure()
        result = self.results[min(self.calls, len(self.results)) - 1]
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result()
        return result


class FakeTerminal:
    """Records frames and requests to quit after `quit_after` frames."""

    def __init__(self, quit_after: int = 3, on_exit: Optional[Callable[[], None]] = None) -> None:
        self.quit_after = quit_after
        self.on_exit = on_exit
        self.frames: List[Frame] = []
        self.entered = False
        self.exited = False

    def __enter__(self) -> FakeTerminal:
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.exited = True
        if self.on_exit is not None:
            self.on_exit()
        return False

    def draw(self, frame: Frame) -> None:
        self.frames.append(frame)

    def quit_requested(self) -> bool:
        return len(self.frames) >= self.quit_after


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
