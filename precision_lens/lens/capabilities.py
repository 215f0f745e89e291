"""Interfaces of the host capabilities the lens components depend on.

Each capability is injected at construction time. A component given ``None``
for an optional capability treats it as unavailable rather than probing for it.
"""

from typing import Callable, Optional, Protocol

import numpy as np

from .state import AnalysisRequest, Facing


class StreamHandle(Protocol):
    """A live video stream owned by the camera session."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def read_frame(self) -> Optional[np.ndarray]: ...

    def stop(self) -> None: ...


class MediaSource(Protocol):
    async def acquire(self, facing: Facing) -> StreamHandle: ...


class PlainStorage(Protocol):
    async def get_item(self, key: str) -> Optional[str]: ...
    async def set_item(self, key: str, value: str) -> None: ...


class AnalysisBridge(Protocol):
    async def send(self, request: AnalysisRequest) -> None: ...


class CaptureFeedback(Protocol):
    def flash(self) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with ``call_later``; an asyncio event loop qualifies."""

    def call_later(self, delay: float, callback: Callable[..., object], *args: object) -> TimerHandle: ...
