"""Mock host capabilities for lens testing.

Provides in-memory stand-ins for the media source, plain storage, analysis
bridge, capture feedback and timer scheduler, so the lens components can be
driven deterministically without a camera, disk or network.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import numpy as np

from precision_lens.lens.errors import AcquisitionError, BridgeUnavailableError, StorageError
from precision_lens.lens.state import AnalysisRequest, Facing


def make_frame(width: int = 640, height: int = 480, color: tuple[int, int, int] = (40, 80, 120)) -> np.ndarray:
    """Solid BGR frame."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :] = color
    return frame


class MockStream:
    """StreamHandle with a fixed frame."""

    def __init__(self, facing: Facing, frame: Optional[np.ndarray] = None) -> None:
        self.facing = facing
        self.frame = frame if frame is not None else make_frame()
        self.stopped = False
        self.stop_calls = 0

    @property
    def width(self) -> int:
        return int(self.frame.shape[1])

    @property
    def height(self) -> int:
        return int(self.frame.shape[0])

    def read_frame(self) -> Optional[np.ndarray]:
        return None if self.stopped else self.frame

    def stop(self) -> None:
        self.stop_calls += 1
        self.stopped = True


class MockMediaSource:
    """MediaSource that records every acquisition.

    ``fail_with`` makes the next acquisitions raise ``AcquisitionError``.
    ``max_live`` tracks the highest number of simultaneously unreleased
    streams, which must never exceed one.
    """

    def __init__(self, frame: Optional[np.ndarray] = None, *, delay: float = 0.0) -> None:
        self.frame = frame
        self.delay = delay
        self.fail_with: Optional[str] = None
        self.requests: List[Facing] = []
        self.streams: List[MockStream] = []
        self.max_live = 0

    @property
    def live(self) -> int:
        return sum(1 for s in self.streams if not s.stopped)

    async def acquire(self, facing: Facing) -> MockStream:
        self.requests.append(facing)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise AcquisitionError(self.fail_with)
        stream = MockStream(facing, None if self.frame is None else self.frame.copy())
        self.streams.append(stream)
        self.max_live = max(self.max_live, self.live)
        return stream


class MemoryStorage:
    """PlainStorage in a dict, with switchable failures."""

    def __init__(self) -> None:
        self.items: Dict[str, str] = {}
        self.fail_writes = False
        self.fail_reads = False
        self.writes = 0

    async def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageError("read failed")
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError("quota exceeded")
        self.writes += 1
        self.items[key] = value


class MockBridge:
    """AnalysisBridge that records requests.

    When ``gate`` is set, ``send`` blocks on it, with ``waiting`` raised, until
    the test releases it.
    """

    def __init__(self, *, fail: bool = False) -> None:
        self.requests: List[AnalysisRequest] = []
        self.fail = fail
        self.gate: Optional[asyncio.Event] = None
        self.waiting = False

    async def send(self, request: AnalysisRequest) -> None:
        if self.fail:
            raise BridgeUnavailableError("bridge offline")
        if self.gate is not None:
            self.waiting = True
            try:
                await self.gate.wait()
            finally:
                self.waiting = False
        self.requests.append(request)


class MockFeedback:
    def __init__(self, *, broken: bool = False) -> None:
        self.flashes = 0
        self.broken = broken

    def flash(self) -> None:
        self.flashes += 1
        if self.broken:
            raise RuntimeError("no audio device")


@dataclass
class _Timer:
    due: float
    callback: Callable[..., object]
    args: tuple
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Scheduler + clock driven by ``advance``; no real time passes."""

    now: float = 0.0
    timers: List[_Timer] = field(default_factory=list)

    def clock(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[..., object], *args: object) -> _Timer:
        timer = _Timer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def armed(self) -> int:
        return sum(1 for t in self.timers if not t.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if not t.cancelled and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = timer.due
            timer.callback(*timer.args)
        self.now = target
        self.timers = [t for t in self.timers if not t.cancelled]
