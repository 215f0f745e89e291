"""Routes hardware events and UI buttons onto the session and capture pipeline."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..core.asyncio_utils import cancel_pending, create_logged_task
from ..core.logging_utils import get_module_logger
from .gestures import GestureDisambiguator
from .pipeline import CapturePipeline
from .session import CameraSession
from .state import GestureAction

logger = get_module_logger("InputRouter")


class HardwareEvent(str, Enum):
    """Physical events delivered by the host."""

    SIDE_CLICK = "side-click"
    SCROLL_UP = "scroll-up"
    SCROLL_DOWN = "scroll-down"
    LONG_PRESS_START = "long-press-start"


class InputRouter:
    """Single entry point for every trigger source.

    Hardware presses go through the gesture disambiguator; ``SINGLE`` captures
    and ``DOUBLE`` starts or stops the camera. The UI buttons call the same
    session and pipeline operations, so both paths behave identically.
    Scroll events adjust zoom synchronously, in arrival order.
    """

    def __init__(
        self,
        session: CameraSession,
        pipeline: CapturePipeline,
        gesture_factory: Callable[[Callable[[GestureAction], None]], GestureDisambiguator],
    ) -> None:
        self._session = session
        self._pipeline = pipeline
        self._gestures = gesture_factory(self._on_gesture)
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def gestures(self) -> GestureDisambiguator:
        return self._gestures

    @property
    def pending_tasks(self) -> set[asyncio.Task[Any]]:
        return self._pending

    # ------------------------------------------------------------------
    # Hardware path

    def handle_hardware(self, event: HardwareEvent, timestamp: Optional[float] = None) -> None:
        if event is HardwareEvent.SIDE_CLICK:
            self._gestures.press(timestamp)
        elif event is HardwareEvent.SCROLL_UP:
            self._session.zoom_in()
        elif event is HardwareEvent.SCROLL_DOWN:
            self._session.zoom_out()
        elif event is HardwareEvent.LONG_PRESS_START:
            logger.info("Long press started (reserved by the host)")

    def _on_gesture(self, action: GestureAction) -> None:
        if action is GestureAction.SINGLE:
            self._spawn(self._pipeline.capture_and_dispatch(), "capture")
        elif action is GestureAction.DOUBLE:
            self._spawn(self._session.start(), "toggle-camera")

    # ------------------------------------------------------------------
    # UI buttons

    async def press_start_stop(self) -> bool:
        return await self._session.start()

    async def press_switch_facing(self) -> bool:
        return await self._session.switch_facing()

    async def press_review(self) -> bool:
        return await self._pipeline.review_last_capture()

    # ------------------------------------------------------------------

    def _spawn(self, coro: Awaitable[Any], context: str) -> asyncio.Task[Any]:
        return create_logged_task(coro, logger=logger, context=context, pending=self._pending)

    async def wait_idle(self) -> None:
        """Wait for every task spawned from gestures so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def shutdown(self) -> None:
        self._gestures.reset()
        await cancel_pending(self._pending)


__all__ = ["HardwareEvent", "InputRouter"]
